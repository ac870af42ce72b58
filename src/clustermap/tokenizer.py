"""
Tokenizer
=========

Positional tokenization of clustering-file lines.

Two pieces live here:

decode_path
    Small state machine turning a path token such as ``1:2:3`` into the
    tuple ``(1, 2, 3)``. Digit runs are accumulated and any non-digit
    character emits the pending component, so ``1:2:3``, ``1.2.3`` and
    ``1/2/3`` decode identically.
LineScanner
    Cursor over one line that reads whitespace-delimited tokens in order.
    A failed conversion puts the scanner in a failed state in which every
    later read returns None, so optional trailing fields after a malformed
    one are treated as absent.
"""

import re
from typing import List, Optional, Tuple

from .config import FIELD_WHITESPACE

_UINT_PATTERN = re.compile(r"[0-9]+")

# Decimal or scientific notation only; no nan, inf or digit separators
_FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_WHITESPACE = frozenset(FIELD_WHITESPACE)

_DIGITS = frozenset("0123456789")


def decode_path(token: str) -> Tuple[int, ...]:
    """
    Decode a delimited tree path into 1-based child indices.

    Parameters
    ----------
    token : str
        Path token, e.g. ``"1:1:2"``

    Returns
    -------
    tuple of int
        Child indices from root to leaf

    Raises
    ------
    ValueError
        If any component is 0 (paths are 1-based)

    Examples
    --------
    >>> decode_path("1:1:2")
    (1, 1, 2)
    >>> decode_path("3")
    (3,)
    """
    path: List[int] = []
    pending = ""
    in_digits = False

    for char in token:
        if char in _DIGITS:
            pending += char
            in_digits = True
        elif in_digits:
            path.append(_path_component(pending))
            pending = ""
            in_digits = False

    if in_digits:
        path.append(_path_component(pending))

    return tuple(path)


def _path_component(digits: str) -> int:
    value = int(digits)
    if value == 0:
        raise ValueError("There is a '0' in the tree path, lowest allowed integer is 1.")
    return value


def parse_uint(token: str) -> Optional[int]:
    """Parse an unsigned integer token, returning None if malformed."""
    if _UINT_PATTERN.fullmatch(token) is None:
        return None
    return int(token)


def parse_float(token: str) -> Optional[float]:
    """Parse a floating-point token, returning None if malformed."""
    if _FLOAT_PATTERN.fullmatch(token) is None:
        return None
    return float(token)


class LineScanner:
    """
    Sequential reader over the fields of a single line.

    Examples
    --------
    >>> scanner = LineScanner('1:1 0.5 "a b" 7')
    >>> scanner.read_token(), scanner.read_float(), scanner.read_quoted()
    ('1:1', 0.5, 'a b')
    >>> scanner.read_uint()
    7
    >>> scanner.read_uint() is None
    True
    """

    def __init__(self, line: str):
        self.line = line
        self.pos = 0
        self.failed = False

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.line) and self.line[self.pos] in _WHITESPACE:
            self.pos += 1

    def _peek_token(self) -> Tuple[Optional[str], int]:
        self._skip_whitespace()
        start = self.pos
        end = start
        while end < len(self.line) and self.line[end] not in _WHITESPACE:
            end += 1
        if end == start:
            return None, start
        return self.line[start:end], end

    def read_token(self) -> Optional[str]:
        """Read the next whitespace-delimited token."""
        if self.failed:
            return None
        token, end = self._peek_token()
        if token is None:
            self.failed = True
            return None
        self.pos = end
        return token

    def _read_converted(self, convert):
        if self.failed:
            return None
        token, end = self._peek_token()
        value = convert(token) if token is not None else None
        if value is None:
            self.failed = True
            return None
        self.pos = end
        return value

    def read_uint(self) -> Optional[int]:
        """Read an unsigned integer field."""
        return self._read_converted(parse_uint)

    def read_float(self) -> Optional[float]:
        """
        Read the longest floating-point prefix of the next field.

        The number need not fill the token, so in ``0.5"a"`` the flow is
        read and ``"a"`` is left for the next read.
        """
        if self.failed:
            return None
        self._skip_whitespace()
        match = _FLOAT_PATTERN.match(self.line, self.pos)
        if match is None:
            self.failed = True
            return None
        self.pos = match.end()
        return float(match.group())

    def read_quoted(self, quote: str = '"') -> Optional[str]:
        """
        Read the text between the next two ``quote`` characters.

        Anything before the opening quote is discarded. Returns None if
        either quote is missing.
        """
        if self.failed:
            return None
        start = self.line.find(quote, self.pos)
        if start < 0:
            self.failed = True
            return None
        end = self.line.find(quote, start + 1)
        if end < 0:
            self.failed = True
            return None
        self.pos = end + 1
        return self.line[start + 1:end]

    def rest(self) -> str:
        """Unread remainder of the line."""
        return self.line[self.pos:]


__all__ = [
    "decode_path",
    "parse_uint",
    "parse_float",
    "LineScanner",
]
