"""
Infrastructure Layer - network access.

Contains:
- http: Streaming page fetcher and the adaptive transfer buffer
"""
