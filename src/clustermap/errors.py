"""
Errors raised while loading clustering files.

All parse errors carry the file name, the 1-based line number and the raw
line text so the offending input can be located. I/O failures are not
wrapped; they propagate as the builtin ``OSError`` subclasses.
"""

from typing import Optional


class ClusterMapError(ValueError):
    """Base class for all clustering-file loader errors."""

    def __init__(
        self,
        message: str,
        filename: Optional[str] = None,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ):
        self.message = message
        self.filename = filename
        self.line_number = line_number
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        location = []
        if self.filename is not None:
            location.append(f"file '{self.filename}'")
        if self.line_number is not None:
            location.append(f"line {self.line_number}")
        text = self.message
        if location:
            text = f"{text} ({', '.join(location)})"
        if self.line is not None:
            text = f"{text}: '{self.line}'"
        return text


class UnsupportedFormatError(ClusterMapError):
    """The file extension does not select a known clustering format."""

    def __init__(self, filename: str, extension: str):
        self.extension = extension
        super().__init__(
            f"Input cluster data from file '{filename}' is of unknown extension "
            f"'{extension}'. Must be 'clu', 'tree' or 'ftree'.",
        )
        self.filename = filename


class FileFormatError(ClusterMapError):
    """A required positional token is missing, malformed or out of range."""


class NameExtractionError(ClusterMapError):
    """The quoted node name could not be delimited on a tree line."""


__all__ = [
    "ClusterMapError",
    "UnsupportedFormatError",
    "FileFormatError",
    "NameExtractionError",
]
