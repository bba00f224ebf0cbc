"""HTTP fetch capability."""

from .client import FetchedPage, HttpFetcher, configure_proxy, get_proxy_status
from .transfer_buffer import MAX_TRANSFER_SIZE, TransferBuffer

__all__ = [
    "MAX_TRANSFER_SIZE",
    "FetchedPage",
    "HttpFetcher",
    "TransferBuffer",
    "configure_proxy",
    "get_proxy_status",
]
