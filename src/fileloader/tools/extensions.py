"""
Extension matching helpers shared by the file loaders.

All matching is a plain suffix comparison. Extensions given without a leading
dot are normalized by prefixing one; exclusion strings are compared as given.
"""

from typing import Iterable, List, Optional


def normalize_extension(extension: str) -> str:
    """
    Return the extension with a leading ".".

    Args:
        extension: Extension with or without leading dot

    Returns:
        Extension guaranteed to start with "."
    """
    return extension if extension.startswith('.') else '.' + extension


def normalize_extensions(extensions: Iterable[str]) -> List[str]:
    """Normalize every extension, keeping order."""
    return [normalize_extension(ext) for ext in extensions]


def has_valid_extension(path: str, extensions: Optional[Iterable[str]] = None) -> bool:
    """
    Check if a path ends with any of the given extensions.

    Args:
        path: Path to check
        extensions: Accepted extensions. None or empty accepts everything.

    Returns:
        True if the path has an accepted extension
    """
    if extensions is None:
        return True

    normalized = normalize_extensions(extensions)
    if not normalized:
        return True

    return any(path.endswith(ext) for ext in normalized)


def is_excluded(path: str, exclude_extensions: Optional[Iterable[str]] = None) -> bool:
    """
    Check if a path ends with any of the excluded suffixes.

    Args:
        path: Path to check
        exclude_extensions: Raw suffixes to exclude (not normalized)

    Returns:
        True if the path should be excluded
    """
    if exclude_extensions is None:
        return False

    return any(path.endswith(excluded) for excluded in exclude_extensions)


def extension_candidates(path: str, extensions: Iterable[str],
                         exclude_extensions: Optional[Iterable[str]] = None) -> Iterable[str]:
    """
    Yield the candidate paths probed when matching extensions, in probe order.

    For each normalized extension: the path itself if it already ends with that
    extension, then the path with the extension appended. Excluded candidates
    are never yielded.

    Args:
        path: Base path
        extensions: Ordered extensions to try
        exclude_extensions: Raw suffixes that disqualify a candidate
    """
    excluded = list(exclude_extensions) if exclude_extensions is not None else None

    for ext in map(normalize_extension, extensions):
        if path.endswith(ext) and not is_excluded(path, excluded):
            yield path

        full_path = path + ext
        if not is_excluded(full_path, excluded):
            yield full_path
