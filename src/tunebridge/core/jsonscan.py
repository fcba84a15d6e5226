"""
Best-effort field extraction from JSON text.

The backend's responses are small and structurally simple: flat objects, or
arrays of flat objects. Rather than decoding a full document, these helpers
scan the raw text for `"key":` markers and return documented defaults
(`""`, `0`, `False`, `[]`) whenever a lookup fails. They never raise.

Known limitations:
- the first occurrence of a key wins, wherever it is nested;
- string values are returned raw (escape sequences are not decoded);
- `extract_array` assumes flat objects and does not special-case braces that
  appear inside string values.
"""

import re

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _find_value(doc: str, key: str) -> int:
    """Index just past `"key":`, or -1."""
    marker = f'"{key}":'
    pos = doc.find(marker)
    if pos < 0:
        return -1
    return pos + len(marker)


def extract_string(doc: str, key: str) -> str:
    """Return the string value of `key`, or "" when absent or malformed."""
    if not doc:
        return ""
    start = -1
    for marker in (f'"{key}":"', f'"{key}": "'):
        pos = doc.find(marker)
        if pos >= 0:
            start = pos + len(marker)
            break
    if start < 0:
        return ""

    i = start
    while True:
        end = doc.find('"', i)
        if end < 0:
            return ""
        # A quote preceded by an odd run of backslashes is escaped
        backslashes = 0
        j = end - 1
        while j >= start and doc[j] == "\\":
            backslashes += 1
            j -= 1
        if backslashes % 2 == 0:
            return doc[start:end]
        i = end + 1


def extract_int(doc: str, key: str) -> int:
    """Return the integer value of `key`, or 0.

    The value runs up to the next `,`, `}` or newline; a value with no such
    terminator counts as malformed.
    """
    if not doc:
        return 0
    start = _find_value(doc, key)
    if start < 0:
        return 0
    ends = [p for p in (doc.find(c, start) for c in ",}\n") if p >= 0]
    if not ends:
        return 0
    m = _INT_PREFIX.match(doc[start : min(ends)])
    if not m:
        return 0
    return int(m.group(1))


def extract_bool(doc: str, key: str) -> bool:
    """Return the boolean value of `key`.

    Accepts JSON literals, then the quoted forms "true"/"True"; False otherwise.
    """
    if not doc:
        return False
    start = _find_value(doc, key)
    if start >= 0:
        i = start
        while i < len(doc) and doc[i].isspace():
            i += 1
        if doc.startswith("true", i):
            return True
        if doc.startswith("false", i):
            return False
    return extract_string(doc, key) in ("true", "True")


def extract_array(doc: str) -> list[str]:
    """Split the outermost array into raw object substrings.

    Scans between the first `[` and the last `]`; every `{...}` span that
    brings the brace depth back to zero becomes one item.
    """
    items: list[str] = []
    if not doc:
        return items
    start = doc.find("[")
    end = doc.rfind("]")
    if start < 0 or end < 0 or end < start:
        return items

    depth = 0
    item_start = -1
    for i in range(start + 1, end):
        ch = doc[i]
        if ch == "{":
            if depth == 0:
                item_start = i
            depth += 1
        elif ch == "}":
            if depth == 0:
                # stray closer
                continue
            depth -= 1
            if depth == 0:
                items.append(doc[item_start : i + 1])
    return items
