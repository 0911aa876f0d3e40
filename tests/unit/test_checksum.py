"""
Unit tests for checksum computation.

Tests file and directory hashing, encodings, exclusions and name handling
of the ChecksumCalculator class.
"""

import base64
import hashlib
import os
import shutil
import tempfile
from pathlib import Path

import pytest

from fileloader.models.config import ChecksumConfig
from fileloader.tools.checksum import ChecksumCalculator, compute_checksum


class TestChecksumCalculator:
    """Test cases for the ChecksumCalculator class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_root = Path(self.temp_dir)

        self.project = self.test_root / "project"
        self._create_tree(self.project)

    def teardown_method(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def _create_tree(self, root: Path):
        (root / "src").mkdir(parents=True)
        (root / "README.md").write_bytes(b"# Project")
        (root / "src" / "main.py").write_bytes(b"print('hi')")
        (root / "src" / "util.py").write_bytes(b"def util(): pass")

    def test_file_hash_is_digest_of_content(self):
        """Test that a file hashes to the digest of its bytes."""
        path = self.project / "README.md"
        assert ChecksumCalculator().compute(str(path)) == hashlib.sha1(b"# Project").hexdigest()
        assert compute_checksum(path) == hashlib.sha1(b"# Project").hexdigest()

    def test_directory_hash_combines_sorted_children(self):
        """Test the directory hash layout."""
        src = self.project / "src"
        main_digest = hashlib.sha1(b"print('hi')").digest()
        util_digest = hashlib.sha1(b"def util(): pass").digest()
        expected = hashlib.sha1(b"main.py" + main_digest + b"util.py" + util_digest).hexdigest()

        assert ChecksumCalculator().compute(str(src)) == expected

    def test_identical_trees_hash_equal(self):
        """Test that location doesn't affect the hash."""
        copy = self.test_root / "elsewhere" / "copy"
        self._create_tree(copy)

        calculator = ChecksumCalculator()
        assert calculator.compute(str(self.project)) == calculator.compute(str(copy))

    def test_content_change_changes_hash(self):
        """Test that a nested edit changes the tree hash."""
        calculator = ChecksumCalculator()
        before = calculator.compute(str(self.project))

        (self.project / "src" / "util.py").write_bytes(b"def util(): return 1")

        assert calculator.compute(str(self.project)) != before

    def test_rename_changes_hash(self):
        """Test that child names are part of a directory hash."""
        calculator = ChecksumCalculator()
        before = calculator.compute(str(self.project))

        (self.project / "README.md").rename(self.project / "README.txt")

        assert calculator.compute(str(self.project)) != before

    def test_empty_directory(self):
        """Test that an empty directory hashes the empty input."""
        empty = self.test_root / "empty"
        empty.mkdir()
        assert ChecksumCalculator().compute(str(empty)) == hashlib.sha1(b"").hexdigest()

    def test_base64_encoding(self):
        """Test base64 output encoding."""
        config = ChecksumConfig(encoding="base64")
        expected = base64.b64encode(hashlib.sha1(b"# Project").digest()).decode("ascii")
        assert ChecksumCalculator(config).compute(str(self.project / "README.md")) == expected

    def test_algorithm(self):
        """Test a non-default algorithm."""
        config = ChecksumConfig(algorithm="SHA256")
        expected = hashlib.sha256(b"# Project").hexdigest()
        assert ChecksumCalculator(config).compute(str(self.project / "README.md")) == expected

    def test_exclude_patterns(self):
        """Test that excluded entries don't contribute to directory hashes."""
        config = ChecksumConfig(exclude=["__pycache__", "*.pyc"])
        calculator = ChecksumCalculator(config)
        before = calculator.compute(str(self.project))

        (self.project / "__pycache__").mkdir()
        (self.project / "__pycache__" / "main.cpython.pyc").write_bytes(b"\x00")
        (self.project / "src" / "stale.pyc").write_bytes(b"\x00")

        assert calculator.compute(str(self.project)) == before
        assert ChecksumCalculator().compute(str(self.project)) != before

    def test_include_root_name(self):
        """Test that the entry's own name is hashed when configured."""
        config = ChecksumConfig(include_root_name=True)
        expected = hashlib.sha1(b"README.md" + b"# Project").hexdigest()
        assert ChecksumCalculator(config).compute(str(self.project / "README.md")) == expected

        copy = self.test_root / "other"
        self._create_tree(copy)
        calculator = ChecksumCalculator(config)
        assert calculator.compute(str(self.project)) != calculator.compute(str(copy))

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlink_cycle_is_skipped(self):
        """Test that a symlink back to an ancestor doesn't contribute to the hash."""
        calculator = ChecksumCalculator()
        before = calculator.compute(str(self.project))

        os.symlink(self.project, self.project / "src" / "loop", target_is_directory=True)

        assert calculator.compute(str(self.project)) == before

    def test_missing_path_raises(self):
        """Test that hashing a missing path surfaces FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ChecksumCalculator().compute(str(self.test_root / "missing"))

    @pytest.mark.asyncio
    async def test_compute_async(self):
        """Test that the async variant gives the same result."""
        calculator = ChecksumCalculator()
        assert await calculator.compute_async(str(self.project)) == calculator.compute(str(self.project))
