"""
File loaders for fileloader.

This module provides FileLoader (blocking) and AsyncFileLoader (asyncio) with
identical operations: existence and directory probes, whole-file reads,
first-match lookups over candidate extensions or paths, batch loads, directory
listings filtered by extension, and checksums.

Probing operations turn OS errors into negative results. Direct loads
propagate them, and batch loads fail as a whole on the first error.
"""

import asyncio
import logging
import os
import stat
from pathlib import Path
from typing import Awaitable, FrozenSet, Iterable, List, Optional, Tuple, Type, TypeVar, Union

import aiofiles
import aiofiles.os

from ..config.parser import load_config
from ..models.config import LoaderConfig
from ..models.results import LoadedFile
from .checksum import ChecksumCalculator
from .extensions import extension_candidates, has_valid_extension, is_excluded


logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

# Errors that make a probe come back negative. ValueError covers paths the OS
# rejects outright, such as ones with embedded null bytes.
PROBE_ERRORS = (OSError, ValueError)


LoaderT = TypeVar('LoaderT', bound='_BaseFileLoader')

# (st_dev, st_ino) of a directory, used to detect symlink cycles
DirectoryKey = Tuple[int, int]


def _as_list(values: Optional[Iterable[str]]) -> Optional[List[str]]:
    return None if values is None else list(values)


def _directory_key(stat_result: os.stat_result) -> DirectoryKey:
    return stat_result.st_dev, stat_result.st_ino


async def _bounded(semaphore: Optional[asyncio.Semaphore], awaitable: Awaitable):
    if semaphore is None:
        return await awaitable
    async with semaphore:
        return await awaitable


class _BaseFileLoader:
    """Configuration and filtering shared by both loader variants."""

    def __init__(self, config: Optional[LoaderConfig] = None):
        """
        Initialize the loader.

        Args:
            config: Loader settings; defaults apply when omitted
        """
        self.config = config or LoaderConfig()
        self._checksums = ChecksumCalculator(self.config.checksum)

    @classmethod
    def from_config_file(cls: Type[LoaderT], config_path: Optional[Union[str, Path]] = None) -> LoaderT:
        """
        Create a loader from a YAML configuration file.

        Args:
            config_path: Path to configuration file. If None, searches default locations.

        Raises:
            ConfigurationError: If the configuration is invalid or unreadable
        """
        return cls(load_config(config_path).config)

    @staticmethod
    def _is_regular_file(mode: int) -> bool:
        return stat.S_ISREG(mode)

    @staticmethod
    def _accepts(file_path: str, extensions: Optional[List[str]],
                 excluded_extensions: Optional[List[str]]) -> bool:
        return has_valid_extension(file_path, extensions) and not is_excluded(file_path, excluded_extensions)


class FileLoader(_BaseFileLoader):
    """
    Blocking file loader.

    Every method returns its value directly. See the module docstring for the
    split between probing and loading error behaviour.
    """

    def exists(self, path: PathLike) -> bool:
        """
        Check if the given path is a readable file.

        Args:
            path: Path to check

        Returns:
            True if the path is a regular file the process can read
        """
        try:
            path = os.fspath(path)
            return self._is_regular_file(os.stat(path).st_mode) and os.access(path, os.R_OK)
        except PROBE_ERRORS:
            return False

    def is_directory(self, path: PathLike) -> bool:
        """
        Check if the given path is a directory.

        Symlinks are not followed unless ``follow_symlinks`` is configured.
        """
        try:
            mode = os.stat(path, follow_symlinks=self.config.follow_symlinks).st_mode
        except PROBE_ERRORS:
            return False
        return stat.S_ISDIR(mode)

    def load(self, path: PathLike) -> bytes:
        """
        Load the file on the given path.

        Raises:
            FileNotFoundError: If the file doesn't exist
            PermissionError: If the file can't be read
            OSError: On any other read failure
        """
        with open(path, 'rb') as f:
            return f.read()

    def get_with_first_matched_extension(self, path: PathLike, extensions: Iterable[str],
                                         exclude_extensions: Optional[Iterable[str]] = None) -> Optional[str]:
        """
        Find the first existing file for the path combined with the ordered extensions.

        For each extension, the path itself is returned if it already ends with
        that extension and exists; otherwise the path with the extension
        appended is tried. Excluded candidates are skipped.

        Args:
            path: Base path
            extensions: Extensions to try, in order
            exclude_extensions: Suffixes that disqualify a candidate

        Returns:
            The first matching path, or None
        """
        for candidate in extension_candidates(os.fspath(path), extensions, exclude_extensions):
            if self.exists(candidate):
                return candidate
        return None

    def load_with_first_matched_extension(self, path: PathLike, extensions: Iterable[str],
                                          exclude_extensions: Optional[Iterable[str]] = None) -> Optional[LoadedFile]:
        """
        Load the first matched file for the path combined with the ordered extensions.

        Returns:
            LoadedFile with the content and matched path, or None if nothing matched
        """
        match = self.get_with_first_matched_extension(path, extensions, exclude_extensions)
        return None if match is None else LoadedFile(self.load(match), match)

    def load_any(self, paths: Iterable[PathLike]) -> Optional[LoadedFile]:
        """
        Load the first of the given paths that can be read.

        Returns:
            LoadedFile for the first readable path, or None if none could be read
        """
        for path in paths:
            path = os.fspath(path)
            try:
                return LoadedFile(self.load(path), path)
            except PROBE_ERRORS as e:
                logger.debug(f"Skipping unreadable candidate {path}: {e}")
        return None

    def load_all(self, paths: Iterable[PathLike]) -> List[bytes]:
        """
        Load all the given paths, preserving order.

        Raises:
            OSError: If any path can't be read; no partial result is returned
        """
        return [self.load(path) for path in paths]

    def get_all_in_directory(self, directory: PathLike, extensions: Optional[Iterable[str]] = None,
                             excluded_extensions: Optional[Iterable[str]] = None,
                             recursive: bool = False) -> List[str]:
        """
        Get the files in the given directory.

        Directories are never returned. With ``recursive`` set, their matching
        files are spliced in where the directory appeared in the listing.

        Args:
            directory: Directory to list
            extensions: Accepted extensions; None or empty accepts all
            excluded_extensions: Suffixes to leave out
            recursive: Whether to descend into subdirectories

        Returns:
            Matching file paths in directory listing order

        Raises:
            OSError: If a directory can't be listed
        """
        return self._collect_directory(os.fspath(directory), _as_list(extensions),
                                       _as_list(excluded_extensions), recursive, frozenset())

    def _collect_directory(self, directory: str, extensions: Optional[List[str]],
                           excluded_extensions: Optional[List[str]], recursive: bool,
                           ancestors: FrozenSet[DirectoryKey]) -> List[str]:
        ancestors = ancestors | {_directory_key(os.stat(directory))}

        matched = []
        for name in os.listdir(directory):
            file_path = os.path.join(directory, name)

            if not self.is_directory(file_path):
                if self._accepts(file_path, extensions, excluded_extensions):
                    matched.append(file_path)
                continue

            if not recursive:
                continue

            # A followed symlink can point back at a directory being listed
            if _directory_key(os.stat(file_path)) in ancestors:
                logger.debug(f"Skipping directory cycle at {file_path}")
                continue

            logger.debug(f"Descending into {file_path}")
            matched.extend(self._collect_directory(file_path, extensions, excluded_extensions,
                                                   recursive, ancestors))

        return matched

    def load_all_in_directory(self, directory: PathLike, extensions: Optional[Iterable[str]] = None,
                              excluded_extensions: Optional[Iterable[str]] = None,
                              recursive: bool = False) -> List[bytes]:
        """Load every file get_all_in_directory would return, in the same order."""
        return self.load_all(self.get_all_in_directory(directory, extensions, excluded_extensions, recursive))

    def get_checksum(self, path: PathLike) -> str:
        """Compute the checksum of a file or directory tree."""
        return self._checksums.compute(path)


class AsyncFileLoader(_BaseFileLoader):
    """
    Asyncio file loader.

    Same operations and semantics as FileLoader, as coroutines. File I/O goes
    through aiofiles. Batch operations issue their reads together; fallback
    operations try one candidate at a time.
    """

    async def exists(self, path: PathLike) -> bool:
        """Check if the given path is a readable file."""
        try:
            path = os.fspath(path)
            stat_result = await aiofiles.os.stat(path)
            if not self._is_regular_file(stat_result.st_mode):
                return False
            return await aiofiles.os.access(path, os.R_OK)
        except PROBE_ERRORS:
            return False

    async def is_directory(self, path: PathLike) -> bool:
        """Check if the given path is a directory."""
        try:
            stat_result = await aiofiles.os.stat(path, follow_symlinks=self.config.follow_symlinks)
        except PROBE_ERRORS:
            return False
        return stat.S_ISDIR(stat_result.st_mode)

    async def load(self, path: PathLike) -> bytes:
        """
        Load the file on the given path.

        Raises:
            FileNotFoundError: If the file doesn't exist
            PermissionError: If the file can't be read
            OSError: On any other read failure
        """
        async with aiofiles.open(path, 'rb') as f:
            return await f.read()

    async def get_with_first_matched_extension(self, path: PathLike, extensions: Iterable[str],
                                               exclude_extensions: Optional[Iterable[str]] = None) -> Optional[str]:
        """Find the first existing file for the path combined with the ordered extensions."""
        for candidate in extension_candidates(os.fspath(path), extensions, exclude_extensions):
            if await self.exists(candidate):
                return candidate
        return None

    async def load_with_first_matched_extension(self, path: PathLike, extensions: Iterable[str],
                                                exclude_extensions: Optional[Iterable[str]] = None) -> Optional[LoadedFile]:
        """Load the first matched file for the path combined with the ordered extensions."""
        match = await self.get_with_first_matched_extension(path, extensions, exclude_extensions)
        return None if match is None else LoadedFile(await self.load(match), match)

    async def load_any(self, paths: Iterable[PathLike]) -> Optional[LoadedFile]:
        """Load the first of the given paths that can be read."""
        for path in paths:
            path = os.fspath(path)
            try:
                return LoadedFile(await self.load(path), path)
            except PROBE_ERRORS as e:
                logger.debug(f"Skipping unreadable candidate {path}: {e}")
        return None

    async def load_all(self, paths: Iterable[PathLike]) -> List[bytes]:
        """
        Load all the given paths concurrently, preserving order.

        At most ``limits.max_concurrent`` reads run at once when configured.

        Raises:
            OSError: If any path can't be read; no partial result is returned
        """
        semaphore = self._new_semaphore()
        return list(await asyncio.gather(*(_bounded(semaphore, self.load(path)) for path in paths)))

    async def get_all_in_directory(self, directory: PathLike, extensions: Optional[Iterable[str]] = None,
                                   excluded_extensions: Optional[Iterable[str]] = None,
                                   recursive: bool = False) -> List[str]:
        """
        Get the files in the given directory.

        Children are examined concurrently but results keep the listing order,
        with subdirectory matches spliced in place when ``recursive`` is set.
        At most ``limits.max_concurrent`` stat/listdir calls run at once when
        configured.

        Raises:
            OSError: If a directory can't be listed
        """
        return await self._collect_directory(os.fspath(directory), _as_list(extensions),
                                             _as_list(excluded_extensions), recursive, frozenset(),
                                             self._new_semaphore())

    async def _collect_directory(self, directory: str, extensions: Optional[List[str]],
                                 excluded_extensions: Optional[List[str]], recursive: bool,
                                 ancestors: FrozenSet[DirectoryKey],
                                 semaphore: Optional[asyncio.Semaphore]) -> List[str]:
        directory_stat = await _bounded(semaphore, aiofiles.os.stat(directory))
        ancestors = ancestors | {_directory_key(directory_stat)}

        async def collect(name: str) -> List[str]:
            file_path = os.path.join(directory, name)

            if not await _bounded(semaphore, self.is_directory(file_path)):
                return [file_path] if self._accepts(file_path, extensions, excluded_extensions) else []

            if not recursive:
                return []

            # A followed symlink can point back at a directory being listed
            child_stat = await _bounded(semaphore, aiofiles.os.stat(file_path))
            if _directory_key(child_stat) in ancestors:
                logger.debug(f"Skipping directory cycle at {file_path}")
                return []

            logger.debug(f"Descending into {file_path}")
            return await self._collect_directory(file_path, extensions, excluded_extensions,
                                                 recursive, ancestors, semaphore)

        names = await _bounded(semaphore, aiofiles.os.listdir(directory))
        groups = await asyncio.gather(*(collect(name) for name in names))
        return [file_path for group in groups for file_path in group]

    def _new_semaphore(self) -> Optional[asyncio.Semaphore]:
        max_concurrent = self.config.limits.max_concurrent
        return asyncio.Semaphore(max_concurrent) if max_concurrent else None

    async def load_all_in_directory(self, directory: PathLike, extensions: Optional[Iterable[str]] = None,
                                    excluded_extensions: Optional[Iterable[str]] = None,
                                    recursive: bool = False) -> List[bytes]:
        """Load every file get_all_in_directory would return, in the same order."""
        paths = await self.get_all_in_directory(directory, extensions, excluded_extensions, recursive)
        return await self.load_all(paths)

    async def get_checksum(self, path: PathLike) -> str:
        """Compute the checksum of a file or directory tree."""
        return await self._checksums.compute_async(path)
