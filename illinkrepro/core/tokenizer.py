"""Splitting of recorded command-line text into tokens and back."""

from __future__ import annotations

__all__ = ["split_line", "quote_token", "join_tokens"]

_QUOTE = '"'
_SEPARATOR = " "


def split_line(line: str) -> list[str]:
    """
    Split one line of command-line text on spaces outside double-quote spans.

    Quote characters toggle the quoted state and are dropped from the tokens.
    An unterminated quote is closed at the end of the line. Runs of separators
    never produce empty tokens, but an explicit ``""`` yields an empty token.
    """
    tokens: list[str] = []
    current: list[str] = []
    in_token = False
    quoted = False

    for ch in line:
        if ch == _QUOTE:
            quoted = not quoted
            in_token = True
        elif ch == _SEPARATOR and not quoted:
            if in_token:
                tokens.append("".join(current))
                current = []
                in_token = False
        else:
            current.append(ch)
            in_token = True

    if in_token:
        tokens.append("".join(current))

    return tokens


def quote_token(token: str) -> str:
    """Quote a token so that split_line reads it back as a single token."""
    if not token or any(ch.isspace() for ch in token):
        return f"{_QUOTE}{token}{_QUOTE}"
    return token


def join_tokens(tokens) -> str:
    """Join tokens with single spaces, quoting the ones that need it."""
    return " ".join(quote_token(token) for token in tokens)
