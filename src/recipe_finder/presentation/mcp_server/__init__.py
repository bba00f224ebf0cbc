"""
Recipe Finder MCP Server - Presentation Layer

Usage:
    from recipe_finder.presentation.mcp_server import create_server, main
"""

from .server import create_server, main

__all__ = ["create_server", "main"]
