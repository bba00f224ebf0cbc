"""
Host memory readings.

Sizes transfer buffers from what the host reports:
- total installed RAM picks the initial buffer capacity tier (once per process)
- currently available RAM gates every buffer growth
"""

from __future__ import annotations

import logging
from functools import lru_cache

import psutil

logger = logging.getLogger(__name__)

KIB = 1024
MIB = 1024 * KIB

# Initial transfer buffer capacities
DEFAULT_INITIAL_CAPACITY = 128 * KIB    # total RAM unknown
LOW_TIER_CAPACITY = 16 * KIB            # hosts below 128 MB RAM
MID_TIER_CAPACITY = 64 * KIB            # hosts with 128-512 MB RAM
HIGH_TIER_CAPACITY = 256 * KIB          # hosts above 512 MB RAM

LOW_TIER_RAM = 128 * MIB
MID_TIER_RAM = 512 * MIB


def total_memory() -> int:
    """Return installed physical memory in bytes, or 0 if it cannot be read."""
    try:
        return int(psutil.virtual_memory().total)
    except (OSError, RuntimeError) as e:
        logger.warning(f"Failed to read total system memory: {e}")
        return 0


def free_memory() -> int:
    """Return memory currently available for allocation in bytes, or 0 if unknown."""
    try:
        return int(psutil.virtual_memory().available)
    except (OSError, RuntimeError) as e:
        logger.warning(f"Failed to read free system memory: {e}")
        return 0


def capacity_for_total_memory(total_ram: int) -> int:
    """Map installed RAM onto one of the three buffer capacity tiers."""
    if total_ram <= 0:
        return DEFAULT_INITIAL_CAPACITY
    if total_ram < LOW_TIER_RAM:
        return LOW_TIER_CAPACITY
    if total_ram < MID_TIER_RAM:
        return MID_TIER_CAPACITY
    return HIGH_TIER_CAPACITY


@lru_cache(maxsize=1)
def detect_initial_capacity() -> int:
    """
    Initial transfer buffer capacity for this process.

    Chosen once from total installed memory and cached; individual
    buffers never change it.
    """
    total_ram = total_memory()
    if total_ram == 0:
        logger.info("Unable to detect system memory, using default transfer buffer size")
    else:
        logger.info(f"Detected installed system memory: {total_ram // MIB} MB RAM")
    return capacity_for_total_memory(total_ram)
