"""
Data models for fileloader.

This module contains the configuration models, result types and loader protocols.
"""

from .config import LoaderConfig
from .interfaces import AsyncFileLoaderProtocol, FileLoaderProtocol
from .results import LoadedFile

__all__ = ['AsyncFileLoaderProtocol', 'FileLoaderProtocol', 'LoadedFile', 'LoaderConfig']
