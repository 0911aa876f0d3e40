"""
Unit tests for configuration data models.

Tests validation, normalization and serialization of the loader configuration.
"""

import pytest
from pydantic import ValidationError

from fileloader.models.config import (
    ChecksumConfig,
    ChecksumEncoding,
    LimitsConfig,
    LoaderConfig,
    validate_config_dict
)


class TestChecksumConfig:
    """Test cases for ChecksumConfig."""

    def test_default_config(self):
        """Test default checksum configuration."""
        config = ChecksumConfig()

        assert config.algorithm == "sha1"
        assert config.encoding == ChecksumEncoding.HEX
        assert config.include_root_name is False
        assert config.exclude == []

    def test_string_encoding_conversion(self):
        """Test conversion of string encoding to enum."""
        assert ChecksumConfig(encoding="base64").encoding == ChecksumEncoding.BASE64
        assert ChecksumConfig(encoding="HEX").encoding == ChecksumEncoding.HEX

    def test_invalid_encoding(self):
        """Test that unknown encodings are rejected."""
        with pytest.raises(ValidationError, match="Invalid checksum encoding"):
            ChecksumConfig(encoding="base32")

    def test_algorithm_normalized(self):
        """Test that algorithm names are normalized."""
        assert ChecksumConfig(algorithm=" SHA256 ").algorithm == "sha256"

    @pytest.mark.parametrize("algorithm", ["sha999", "crc32", "shake_128"])
    def test_invalid_algorithm(self, algorithm):
        """Test that unsupported algorithms are rejected."""
        with pytest.raises(ValidationError):
            ChecksumConfig(algorithm=algorithm)

    def test_exclude_normalization(self):
        """Test that a single pattern is accepted and blanks are dropped."""
        assert ChecksumConfig(exclude=".git").exclude == [".git"]
        assert ChecksumConfig(exclude=[".git", " ", "", " *.pyc "]).exclude == [".git", "*.pyc"]

    def test_to_dict(self):
        """Test dictionary conversion."""
        data = ChecksumConfig(encoding="base64").to_dict()
        assert data["encoding"] == "base64"
        assert data["algorithm"] == "sha1"


class TestLimitsConfig:
    """Test cases for LimitsConfig."""

    def test_default_is_unbounded(self):
        """Test default limits."""
        assert LimitsConfig().max_concurrent is None

    def test_positive_limit(self):
        """Test that only positive limits are accepted."""
        assert LimitsConfig(max_concurrent=8).max_concurrent == 8

        with pytest.raises(ValidationError):
            LimitsConfig(max_concurrent=0)


class TestLoaderConfig:
    """Test cases for LoaderConfig."""

    def test_defaults(self):
        """Test default loader configuration."""
        config = LoaderConfig()

        assert config.follow_symlinks is False
        assert config.checksum == ChecksumConfig()
        assert config.limits == LimitsConfig()

    def test_nested_dicts(self):
        """Test building nested configuration from dictionaries."""
        config = LoaderConfig(checksum={"algorithm": "md5"}, limits={"max_concurrent": 4})

        assert config.checksum.algorithm == "md5"
        assert config.limits.max_concurrent == 4

    def test_frozen(self):
        """Test that configuration can't be changed after creation."""
        config = LoaderConfig()
        with pytest.raises(ValidationError):
            config.follow_symlinks = True

    def test_round_trip_through_dict(self):
        """Test that to_dict output rebuilds an equal configuration."""
        config = LoaderConfig(checksum={"encoding": "base64", "exclude": [".git"]}, follow_symlinks=True)
        assert LoaderConfig.from_dict(config.to_dict()) == config

    def test_str(self):
        """Test string representation."""
        text = str(LoaderConfig(limits={"max_concurrent": 2}))

        assert "sha1/hex" in text
        assert "Max concurrent: 2" in text
        assert "unbounded" in str(LoaderConfig())


class TestValidateConfigDict:
    """Test cases for validate_config_dict()."""

    def test_valid_dict(self):
        """Test validation of a complete configuration."""
        data = validate_config_dict({
            "checksum": {"algorithm": "sha256", "encoding": "hex"},
            "limits": {"max_concurrent": 16},
            "follow_symlinks": True
        })

        assert data["checksum"]["algorithm"] == "sha256"
        assert data["limits"]["max_concurrent"] == 16
        assert data["follow_symlinks"] is True

    def test_empty_dict_gives_defaults(self):
        """Test that an empty mapping validates to the defaults."""
        assert validate_config_dict({}) == LoaderConfig().to_dict()

    def test_empty_sections(self):
        """Test that empty YAML sections fall back to defaults."""
        assert validate_config_dict({"checksum": None})["checksum"] == ChecksumConfig().to_dict()

    def test_unknown_section(self):
        """Test that unknown sections are rejected."""
        with pytest.raises(ValueError, match="Unknown configuration sections: roots"):
            validate_config_dict({"roots": ["."]})

    def test_section_must_be_mapping(self):
        """Test that sections must be mappings."""
        with pytest.raises(ValueError, match="must be a mapping"):
            validate_config_dict({"checksum": "sha1"})

    def test_invalid_values(self):
        """Test that invalid values surface as ValueError."""
        with pytest.raises(ValueError, match="Configuration validation failed"):
            validate_config_dict({"checksum": {"algorithm": "nope"}})
