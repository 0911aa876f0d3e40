"""
Protocols describing the public surface of the file loaders.

FileLoaderProtocol covers the blocking loader; AsyncFileLoaderProtocol covers
the coroutine-based one. Both expose the same operation names.
"""

from typing import Iterable, List, Optional, Protocol, runtime_checkable

from .results import LoadedFile


@runtime_checkable
class FileLoaderProtocol(Protocol):
    """Protocol for blocking file loading operations."""

    def exists(self, path: str) -> bool:
        """Check if path is a readable file. Never raises."""
        ...

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory. Never raises."""
        ...

    def load(self, path: str) -> bytes:
        """
        Read the whole file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            PermissionError: If the file can't be read
            OSError: On any other read failure
        """
        ...

    def get_with_first_matched_extension(self, path: str, extensions: Iterable[str],
                                         exclude_extensions: Optional[Iterable[str]] = None) -> Optional[str]:
        ...

    def load_with_first_matched_extension(self, path: str, extensions: Iterable[str],
                                          exclude_extensions: Optional[Iterable[str]] = None) -> Optional[LoadedFile]:
        ...

    def load_any(self, paths: Iterable[str]) -> Optional[LoadedFile]:
        ...

    def load_all(self, paths: Iterable[str]) -> List[bytes]:
        ...

    def get_all_in_directory(self, directory: str, extensions: Optional[Iterable[str]] = None,
                             excluded_extensions: Optional[Iterable[str]] = None,
                             recursive: bool = False) -> List[str]:
        ...

    def load_all_in_directory(self, directory: str, extensions: Optional[Iterable[str]] = None,
                              excluded_extensions: Optional[Iterable[str]] = None,
                              recursive: bool = False) -> List[bytes]:
        ...

    def get_checksum(self, path: str) -> str:
        ...


@runtime_checkable
class AsyncFileLoaderProtocol(Protocol):
    """Protocol for async file loading operations. Same semantics as FileLoaderProtocol."""

    async def exists(self, path: str) -> bool:
        ...

    async def is_directory(self, path: str) -> bool:
        ...

    async def load(self, path: str) -> bytes:
        ...

    async def get_with_first_matched_extension(self, path: str, extensions: Iterable[str],
                                               exclude_extensions: Optional[Iterable[str]] = None) -> Optional[str]:
        ...

    async def load_with_first_matched_extension(self, path: str, extensions: Iterable[str],
                                                exclude_extensions: Optional[Iterable[str]] = None) -> Optional[LoadedFile]:
        ...

    async def load_any(self, paths: Iterable[str]) -> Optional[LoadedFile]:
        ...

    async def load_all(self, paths: Iterable[str]) -> List[bytes]:
        ...

    async def get_all_in_directory(self, directory: str, extensions: Optional[Iterable[str]] = None,
                                   excluded_extensions: Optional[Iterable[str]] = None,
                                   recursive: bool = False) -> List[str]:
        ...

    async def load_all_in_directory(self, directory: str, extensions: Optional[Iterable[str]] = None,
                                    excluded_extensions: Optional[Iterable[str]] = None,
                                    recursive: bool = False) -> List[bytes]:
        ...

    async def get_checksum(self, path: str) -> str:
        ...
