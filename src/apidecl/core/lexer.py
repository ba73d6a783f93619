"""
Lexer for apidecl declarations.

Splits ``(keyword arg1 arg2 ...)`` into its keyword and argument tokens.
Arguments are whitespace separated, except inside a ``{...}`` map literal,
which is kept as a single token.
"""

from __future__ import annotations

_WHITESPACE = " \t\n\r"


def tokenize(declaration: str) -> list[str]:
    """Split a declaration into its tokens, keyword first.

    The outer parentheses are dropped. Whitespace inside braces does not
    split, so ``{:id userId :name name}`` comes back as one token.
    """
    source = declaration.strip()
    if source.startswith("("):
        source = source[1:]
    if source.endswith(")"):
        source = source[:-1]

    tokens: list[str] = []
    current: list[str] = []
    depth = 0

    for c in source:
        if c == "{":
            depth += 1
        elif c == "}":
            depth = max(depth - 1, 0)

        if c in _WHITESPACE and depth == 0:
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(c)

    if current:
        tokens.append("".join(current))
    return tokens


def split_declaration(declaration: str) -> tuple[str, list[str]]:
    """Return ``(keyword, arguments)`` for a declaration.

    An empty declaration yields an empty keyword and no arguments.
    """
    tokens = tokenize(declaration)
    if not tokens:
        return "", []
    return tokens[0], tokens[1:]
