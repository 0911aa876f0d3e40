"""
fileloader - Core Package

Blocking and asyncio helpers for loading files from disk: existence checks,
first-match lookups over candidate extensions or paths, batch and directory
loads, and content checksums.
"""

__version__ = "0.1.0"
__author__ = "fileloader Team"

from .models.config import LoaderConfig
from .models.results import LoadedFile
from .tools.file_loader import AsyncFileLoader, FileLoader

__all__ = [
    'AsyncFileLoader',
    'FileLoader',
    'LoadedFile',
    'LoaderConfig'
]
