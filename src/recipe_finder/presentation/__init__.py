"""
Presentation Layer - interactive surfaces.

Contains:
- channel: Bounded outcome channel, SearchController and renderer protocol
- cli: Console surface (recipe-finder)
- mcp_server: MCP tool surface (recipe-finder-mcp)
"""
