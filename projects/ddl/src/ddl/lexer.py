"""Quote and parenthesis aware scanning of SQL text."""

from collections.abc import Iterator
from typing import NamedTuple

QUOTES = frozenset("'\"`")
ESCAPE = "\\"
NOT_FOUND = -1


class ScanToken(NamedTuple):
    """A character together with the scanner state after reading it."""

    index: int
    char: str
    quoted: bool  # Inside a quoted span, delimiting quotes included
    depth: int  # Parenthesis depth after this character


def scan(text: str, start: int = 0) -> Iterator[ScanToken]:
    """Walk text tracking one open quote kind and a flat parenthesis depth.

    A backslash escapes the character after it, so only an odd run of
    backslashes keeps a matching quote from closing the span. Unbalanced
    input is not an error; the scan simply ends in whatever state it reached.
    """
    quote: str | None = None
    escaped = False
    depth = 0

    for index in range(start, len(text)):
        char = text[index]
        if quote:
            if escaped:
                escaped = False
            elif char == ESCAPE:
                escaped = True
            elif char == quote:
                quote = None
            yield ScanToken(index, char, quoted=True, depth=depth)
            continue

        if char in QUOTES:
            quote = char
            yield ScanToken(index, char, quoted=True, depth=depth)
            continue

        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        yield ScanToken(index, char, quoted=False, depth=depth)


def strip_comments(sql: str) -> str:
    """Remove block comments and ``--``/``#`` line comments outside literals.

    Line comments keep their terminating newline. An unterminated block
    comment runs to the end of the input.
    """
    result: list[str] = []
    quote: str | None = None
    escaped = False
    index = 0
    length = len(sql)

    while index < length:
        char = sql[index]
        if quote:
            if escaped:
                escaped = False
            elif char == ESCAPE:
                escaped = True
            elif char == quote:
                quote = None
        elif char in QUOTES:
            quote = char
        elif sql.startswith("/*", index):
            end = sql.find("*/", index + 2)
            if end == NOT_FOUND:
                break
            index = end + 2
            continue
        elif char == "#" or sql.startswith("--", index):
            end = sql.find("\n", index)
            if end == NOT_FOUND:
                break
            index = end
            continue
        result.append(char)
        index += 1

    return "".join(result)


def split_by_delimiter(text: str, delimiter: str) -> list[str]:
    """Split on a single-character delimiter outside quotes and parentheses.

    Segments keep their surrounding whitespace. A blank trailing segment is
    dropped.
    """
    parts: list[str] = []
    buffer: list[str] = []

    for token in scan(text):
        if token.char == delimiter and not token.quoted and token.depth == 0:
            parts.append("".join(buffer))
            buffer = []
        else:
            buffer.append(token.char)

    tail = "".join(buffer)
    if tail.strip():
        parts.append(tail)
    return parts


def find_matching_paren(text: str, start: int) -> int:
    """Index of the parenthesis closing the one at ``start``, or -1."""
    for token in scan(text, start):
        if token.char == ")" and not token.quoted and token.depth == 0:
            return token.index
    return NOT_FOUND


def find_type_end(text: str) -> int:
    """End of the leading word, treating a parenthesized suffix as part of it.

    ``VARCHAR(255) NOT NULL`` ends after ``VARCHAR(255)``; ``ENUM('a b', 'c')``
    is one word.
    """
    for token in scan(text):
        if token.depth == 0 and not token.quoted and token.char.isspace():
            return token.index
    return len(text)
