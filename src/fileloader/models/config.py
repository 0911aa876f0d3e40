"""
Configuration data models for fileloader.

This module defines the data structures that tune loader behaviour: checksum
hashing options, concurrency limits for batch loads, and symlink handling.
"""

from typing import Dict, List, Optional, Any
from enum import Enum
import hashlib
from pydantic import BaseModel, Field, field_validator


class ChecksumEncoding(Enum):
    """Supported checksum output encodings."""
    HEX = "hex"
    BASE64 = "base64"


class ChecksumConfig(BaseModel):
    """
    Configuration for checksum computation.

    Attributes:
        algorithm: hashlib algorithm name used for files and directories
        encoding: Output encoding of the digest
        include_root_name: Whether the hashed entry's own name is part of its hash
        exclude: fnmatch patterns for entry names skipped in directory hashes
    """

    algorithm: str = Field("sha1", description="hashlib algorithm name")
    encoding: ChecksumEncoding = Field(ChecksumEncoding.HEX, description="Digest output encoding")
    include_root_name: bool = Field(False, description="Whether the entry name is part of its hash")
    exclude: List[str] = Field(default_factory=list, description="Entry name patterns skipped in directory hashes")

    @field_validator('algorithm')
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        """Normalize the algorithm name and make sure hashlib provides it."""
        name = v.strip().lower()
        if name not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported checksum algorithm: {v}")
        # Variable-length digests need an explicit length we don't expose
        if name.startswith('shake_'):
            raise ValueError(f"Variable-length checksum algorithm not supported: {v}")
        return name

    @field_validator('encoding', mode='before')
    @classmethod
    def validate_encoding(cls, v) -> ChecksumEncoding:
        """Validate and convert encoding to enum."""
        if isinstance(v, str):
            try:
                return ChecksumEncoding(v.lower())
            except ValueError:
                raise ValueError(f"Invalid checksum encoding: {v}")
        return v

    @field_validator('exclude', mode='before')
    @classmethod
    def validate_exclude(cls, v) -> List[str]:
        """Accept a single pattern and drop blank ones."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return [pattern.strip() for pattern in v if pattern and pattern.strip()]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data = self.model_dump()
        data['encoding'] = self.encoding.value
        return data


class LimitsConfig(BaseModel):
    """
    Configuration for async loading limits.

    The limit is applied per call: to file reads in load_all, and to the
    stat and listdir calls of a directory listing.

    Attributes:
        max_concurrent: Maximum simultaneous async I/O calls (None for unbounded)
    """

    max_concurrent: Optional[int] = Field(None, gt=0, description="Maximum simultaneous async I/O calls")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class LoaderConfig(BaseModel):
    """
    Main configuration class for fileloader.

    Attributes:
        checksum: Checksum computation settings
        limits: Async loading limits
        follow_symlinks: Whether a symlink to a directory counts as a directory
    """

    checksum: ChecksumConfig = Field(default_factory=ChecksumConfig, description="Checksum settings")
    limits: LimitsConfig = Field(default_factory=LimitsConfig, description="Async loading limits")
    follow_symlinks: bool = Field(False, description="Whether directory checks follow symlinks")

    model_config = {'frozen': True}

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        data = self.model_dump()
        data['checksum'] = self.checksum.to_dict()
        data['limits'] = self.limits.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LoaderConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the configuration."""
        parts = [f"Checksum: {self.checksum.algorithm}/{self.checksum.encoding.value}"]
        max_concurrent = self.limits.max_concurrent
        parts.append(f"Max concurrent: {max_concurrent if max_concurrent else 'unbounded'}")
        parts.append(f"Follow symlinks: {self.follow_symlinks}")

        return " | ".join(parts)


KNOWN_SECTIONS = {'checksum', 'limits', 'follow_symlinks'}


def validate_config_dict(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a configuration dictionary using Pydantic.

    Args:
        config_data: Dictionary containing configuration data

    Returns:
        Validated and normalized configuration dictionary

    Raises:
        ValueError: If configuration is invalid
    """
    unknown = sorted(set(config_data) - KNOWN_SECTIONS)
    if unknown:
        raise ValueError(f"Unknown configuration sections: {', '.join(unknown)}")

    for section in ('checksum', 'limits'):
        value = config_data.get(section)
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Section '{section}' must be a mapping, got {type(value).__name__}")

    # Empty YAML sections come through as None
    present = {key: value for key, value in config_data.items() if value is not None}

    try:
        config = LoaderConfig.from_dict(present)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    return config.to_dict()
