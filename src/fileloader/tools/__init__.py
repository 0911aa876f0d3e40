"""
Loading tools for fileloader.

This module contains the blocking and asyncio file loaders, the extension
matching helpers they share, and checksum computation.
"""
