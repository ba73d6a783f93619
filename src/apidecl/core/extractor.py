"""
Declaration extractor.

Finds API definitions in host source text, typically a TypeScript type
whose keys are declarations::

    export type Users = {
        "(Rest/get /users/:id selfMappings)": {
            req: {
                id: number
            },
            res: User
        }
    }

This is a best-effort text scanner, not a parser of the host language.

Entry point:
    ``extract_definitions(source) -> list[ApiDefinition]``
"""

from __future__ import annotations

import re

from apidecl.core.errors import ExtractionError
from apidecl.core.ir import ApiDefinition

# A quoted declaration key followed by an object whose first member is ``req: {...}``
_DEFINITION_RE = re.compile(r'"\(\s*.*?\s*\)"\s*:\s*\{\s*req\s*:\s*\{.*?\}', re.DOTALL)
# The declaration itself must sit on a single line
_DECLARATION_RE = re.compile(r"\(.*\)")
_REQ_BLOCK_RE = re.compile(r"req:\s*(\{[^}]*\})", re.DOTALL)
# Field key inside the req block; ``id?:`` marks an optional field
_FIELD_KEY_RE = re.compile(r"(\w+)\??\s*:", re.ASCII)


def extract_definitions(source: str) -> list[ApiDefinition]:
    """Extract every API definition from source text.

    Args:
        source: Host source text.

    Returns:
        Definitions in the order they appear. Empty if there are none.

    Raises:
        ExtractionError: If a definition was found but its declaration
            could not be isolated.
    """
    definitions: list[ApiDefinition] = []
    for match in _DEFINITION_RE.finditer(source):
        text = match.group(0)
        declaration = _DECLARATION_RE.search(text)
        if declaration is None:
            raise ExtractionError(f"Unable to extract the declaration from: {text}")

        req_block = _REQ_BLOCK_RE.search(text)
        keys = request_field_names(req_block.group(1) if req_block else None)
        definitions.append(ApiDefinition(declaration=declaration.group(0), req_data_keys=keys))
    return definitions


def request_field_names(req_block: str | None) -> list[str]:
    """Field names declared in a ``{ name: type, ... }`` block, in order, deduplicated."""
    if req_block is None:
        return []
    body = req_block.strip().removeprefix("{").removesuffix("}")
    return list(dict.fromkeys(_FIELD_KEY_RE.findall(body)))
