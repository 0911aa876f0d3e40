"""
Result types returned by the file loaders.
"""

from typing import NamedTuple


class LoadedFile(NamedTuple):
    """
    Content of a loaded file paired with the path it was read from.

    Unpacks like a plain ``(content, path)`` tuple.
    """

    content: bytes
    path: str
