"""Extraction of number-like tokens from a line of text."""

from __future__ import annotations

_DELIMITERS = frozenset(" ,{}[]()=")
_NUMBER_START = frozenset("0123456789+-.")


def extract_numbers(text: str) -> list[str]:
    """Return the tokens that start with a digit, sign or dot.

    A token runs from its first numeric character up to the next delimiter
    (space, comma, brackets, braces, parentheses or '='). A token that is not
    closed by a delimiter before the end of the text is not returned.
    """
    result: list[str] = []
    start: int | None = None
    for index, char in enumerate(text):
        if char in _DELIMITERS:
            if start is not None:
                result.append(text[start:index])
                start = None
        elif start is None and char in _NUMBER_START:
            start = index
    return result