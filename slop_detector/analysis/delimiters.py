"""Delimiter-matching scanner.

Finds the closer that structurally matches an opening brace, bracket or
parenthesis in C-family source text. Comments, string literals and
template-literal interpolations are skipped so delimiters inside them do
not disturb the depth count. The scan is bounded to a fixed window past
the opener so malformed input cannot make it walk the whole file.
"""

NOT_FOUND = -1
MAX_SCAN_WINDOW = 5000

_PAIRS = {"{": "}", "(": ")", "[": "]"}
_QUOTES = frozenset("\"'`")


def find_matching_delimiter(
    content: str,
    open_index: int,
    max_window: int = MAX_SCAN_WINDOW,
) -> int:
    """Return the index of the delimiter closing the one at ``open_index``.

    Args:
        content: Full file content
        open_index: Index of an opening ``{``, ``(`` or ``[``
        max_window: Maximum number of characters to scan past the opener

    Returns:
        Index of the matching closer, or NOT_FOUND
    """
    if open_index < 0 or open_index >= len(content):
        return NOT_FOUND
    opener = content[open_index]
    closer = _PAIRS.get(opener)
    if closer is None:
        return NOT_FOUND

    depth = 1
    string_char = ""  # Active quote character, empty outside strings
    interp_depth = 0  # Brace depth inside ${...}, 0 outside
    interp_quote = ""  # Active quote inside an interpolation

    end = min(len(content), open_index + 1 + max_window)
    i = open_index + 1

    while i < end:
        char = content[i]
        nxt = content[i + 1] if i + 1 < len(content) else ""

        if interp_depth:
            if interp_quote:
                if char == "\\":
                    i += 2
                    continue
                if char == interp_quote:
                    interp_quote = ""
            elif char in _QUOTES:
                interp_quote = char
            elif char == "{":
                interp_depth += 1
            elif char == "}":
                interp_depth -= 1
            i += 1
            continue

        if string_char:
            if char == "\\":
                i += 2
                continue
            if char == string_char:
                string_char = ""
            elif char == "$" and nxt == "{" and string_char == "`":
                interp_depth = 1
                i += 2
                continue
            elif char == "\n" and string_char != "`":
                # Plain quotes never span lines; an unmatched one was an
                # apostrophe or a lifetime, not a literal
                string_char = ""
            i += 1
            continue

        if char == "/" and nxt == "/":
            eol = content.find("\n", i)
            if eol == -1:
                return NOT_FOUND
            i = eol + 1
            continue

        if char == "/" and nxt == "*":
            close = content.find("*/", i + 2)
            if close == -1:
                return NOT_FOUND
            i = close + 2
            continue

        if char in _QUOTES:
            string_char = char
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return i
        i += 1

    return NOT_FOUND


__all__ = ["MAX_SCAN_WINDOW", "NOT_FOUND", "find_matching_delimiter"]
