"""
Checksum computation for files and directory trees.

A file hashes to the digest of its bytes. A directory hashes to the digest of
its children's names and hashes, children sorted by name, so two trees with the
same layout and content hash the same regardless of where they live.

The layout is modelled on the folder-hash package but is not byte-compatible
with it: digests here are over raw child digests, and root names are left out
unless include_root_name is set.
"""

import asyncio
import base64
import fnmatch
import hashlib
import logging
import os
import stat
from typing import FrozenSet, List, Optional, Tuple

from ..models.config import ChecksumConfig, ChecksumEncoding


logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024


class ChecksumCalculator:
    """
    Computes content hashes of files and directory trees.

    Symlinks are followed. Entries whose names match any of the configured
    exclude patterns are left out of directory hashes.
    """

    def __init__(self, config: Optional[ChecksumConfig] = None):
        """
        Initialize the calculator.

        Args:
            config: Checksum settings; defaults to sha1/hex
        """
        self.config = config or ChecksumConfig()

    def compute(self, path: str) -> str:
        """
        Compute the checksum of a file or directory.

        Args:
            path: File or directory to hash

        Returns:
            Encoded digest

        Raises:
            FileNotFoundError: If the path doesn't exist
            OSError: If any part of the tree can't be read
        """
        path = os.fspath(path)
        digest = self._hash_entry(path, frozenset())
        return self._encode(digest)

    async def compute_async(self, path: str) -> str:
        """Compute the checksum without blocking the event loop."""
        return await asyncio.to_thread(self.compute, path)

    def _hash_entry(self, path: str, ancestors: FrozenSet[Tuple[int, int]]) -> Optional[bytes]:
        stat_result = os.stat(path)
        if stat.S_ISDIR(stat_result.st_mode):
            key = (stat_result.st_dev, stat_result.st_ino)
            # Symlinks are followed, so a child can lead back to an ancestor
            if key in ancestors:
                logger.debug(f"Skipping directory cycle at {path}")
                return None
            return self._hash_directory(path, ancestors | {key})
        return self._hash_file(path)

    def _hash_file(self, path: str) -> bytes:
        hasher = self._new_hasher()
        if self.config.include_root_name:
            hasher.update(os.path.basename(path).encode('utf-8'))

        with open(path, 'rb') as f:
            for chunk in iter(lambda: f.read(READ_CHUNK_SIZE), b''):
                hasher.update(chunk)

        return hasher.digest()

    def _hash_directory(self, path: str, ancestors: FrozenSet[Tuple[int, int]]) -> bytes:
        hasher = self._new_hasher()
        if self.config.include_root_name:
            hasher.update(os.path.basename(os.path.normpath(path)).encode('utf-8'))

        for name in self._included_children(path):
            child_digest = self._hash_entry(os.path.join(path, name), ancestors)
            if child_digest is None:
                continue
            logger.debug(f"Hashed {os.path.join(path, name)}")
            hasher.update(name.encode('utf-8'))
            hasher.update(child_digest)

        return hasher.digest()

    def _included_children(self, path: str) -> List[str]:
        names = sorted(os.listdir(path))
        if not self.config.exclude:
            return names
        return [
            name for name in names
            if not any(fnmatch.fnmatch(name, pattern) for pattern in self.config.exclude)
        ]

    def _new_hasher(self):
        return hashlib.new(self.config.algorithm)

    def _encode(self, digest: bytes) -> str:
        if self.config.encoding == ChecksumEncoding.BASE64:
            return base64.b64encode(digest).decode('ascii')
        return digest.hex()


def compute_checksum(path: str, config: Optional[ChecksumConfig] = None) -> str:
    """
    Convenience function to hash a file or directory tree.

    Args:
        path: File or directory to hash
        config: Checksum settings (optional)

    Returns:
        Encoded digest
    """
    return ChecksumCalculator(config).compute(path)
