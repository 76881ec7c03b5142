"""RFC 5545 text escaping and line folding."""

import re

MAX_LINE_OCTETS = 75

_TRAILING_SPACE_NEWLINE = re.compile(r"[ \t]*\n")
_SEPARATORS = re.compile(r"([,;])")


def escape(text: str) -> str:
    """
    Escape a TEXT value.

    Backslash, comma and semicolon get a backslash; newlines (and any
    whitespace right before them) become a literal ``\\n``.
    """
    text = text.replace("\\", "\\\\")
    text = _SEPARATORS.sub(lambda m: "\\" + m.group(1), text)
    return _TRAILING_SPACE_NEWLINE.sub(lambda m: "\\n", text)


def _chunks(line: str, first: int, rest: int) -> list[str]:
    """Split a line into pieces of at most first/rest UTF-8 octets, on character boundaries."""
    chunks = []
    current = []
    size = 0
    limit = first
    for char in line:
        width = len(char.encode("utf-8"))
        if size + width > limit:
            chunks.append("".join(current))
            current, size, limit = [], 0, rest
        current.append(char)
        size += width
    chunks.append("".join(current))
    return chunks


def fold_line(line: str) -> str:
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line
    # continuation lines start with one space, leaving 74 octets of content
    return "\n ".join(_chunks(line, MAX_LINE_OCTETS, MAX_LINE_OCTETS - 1))


def fold(text: str) -> str:
    """Fold every line of ``text`` to 75 octets, dropping blank edge lines."""
    lines = text.split("\n")
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(fold_line(line) for line in lines)
