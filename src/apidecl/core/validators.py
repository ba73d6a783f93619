"""
Grammar validators for declaration arguments.

One validator per syntax category. Each takes the candidate argument
(None when the declaration has no argument at that position), the
category's own options, and the fact context. It returns an error
message, or None on success. Successful validators may record mappings
on the fact context for validators that run after them.
"""

from __future__ import annotations

import re

from apidecl.core.ir import ArgumentSpec, FactContext, SyntaxCategory

# Placeholder in a URL template: /users/:id?:deleted
_PLACEHOLDER_RE = re.compile(r":(\w+)", re.ASCII)
# Clojure-style map literal: {:id userId :name name}
_MAP_RE = re.compile(r"\{\s*(:\w+\s+\w+\s*)*\}", re.ASCII)
_MAP_PAIR_RE = re.compile(r":(\w+)\s+(\w+)", re.ASCII)

SELF_MAPPINGS_TOKEN = "selfMappings"
AS_BODY_TOKEN = "asBody"


def validate_argument(
    candidate: str | None, spec: ArgumentSpec, facts: FactContext
) -> str | None:
    """Validate one positional argument against its spec."""
    return validate_category(spec.category, candidate, spec.options, facts)


def validate_category(
    category: SyntaxCategory,
    candidate: str | None,
    options: tuple[SyntaxCategory, ...],
    facts: FactContext,
) -> str | None:
    """Dispatch to the validator for a syntax category."""
    if category == SyntaxCategory.URL:
        return _validate_url(candidate, facts)

    if category == SyntaxCategory.STRING:
        return _validate_string(candidate)

    if category == SyntaxCategory.MAP:
        return _validate_map(candidate, facts)

    if category == SyntaxCategory.ONE_OF:
        return _validate_one_of(candidate, options, facts)

    if category == SyntaxCategory.SELF_MAPPINGS:
        return _validate_self_mappings(candidate, facts)

    if category == SyntaxCategory.AS_BODY:
        return _validate_as_body(candidate, facts)

    raise ValueError(f"Unknown syntax category: {category}")


def is_url_template(candidate: str | None) -> bool:
    """Check the URL shape: leading slash, and every query segment a placeholder."""
    if candidate is None or not candidate.startswith("/"):
        return False

    parts = candidate.split("?")
    if len(parts) < 2:
        return True

    return all(segment.startswith(":") for segment in parts[1].split("&"))


def url_placeholders(url: str) -> list[str]:
    """Placeholder names in a URL template, in order, without duplicates."""
    return list(dict.fromkeys(_PLACEHOLDER_RE.findall(url)))


def parse_map_literal(candidate: str) -> dict[str, str]:
    """Parse ``{:key value ...}`` into a dict. The caller checks the shape first."""
    return {key: value for key, value in _MAP_PAIR_RE.findall(candidate)}


def _validate_url(candidate: str | None, facts: FactContext) -> str | None:
    if candidate is None or not is_url_template(candidate):
        return "The syntax should be a url"

    mappings = facts.url_formatting_mappings or {}
    for placeholder in url_placeholders(candidate):
        target = mappings.get(placeholder)
        if target is None:
            return f"The keyword '{placeholder}' is not mapping"
        if target not in facts.req_data_keys:
            return f"The mapping '{target}' should be exists in the request data."
    return None


def _validate_string(candidate: str | None) -> str | None:
    if candidate is None:
        return "The syntax should be type/string"
    return None


def _validate_map(candidate: str | None, facts: FactContext) -> str | None:
    if candidate is None or not _MAP_RE.fullmatch(candidate):
        return "The syntax should be a map in clojure way."

    mappings = parse_map_literal(candidate)
    # Both names alias the same dict
    facts.url_formatting_mappings = mappings
    facts.body_mappings = mappings
    return None


def _validate_one_of(
    candidate: str | None,
    options: tuple[SyntaxCategory, ...],
    facts: FactContext,
) -> str | None:
    for option in options:
        if validate_category(option, candidate, (), facts) is None:
            return None
    names = ",".join(option.value for option in options)
    return f"The syntax should be one of {names}"


def _validate_self_mappings(candidate: str | None, facts: FactContext) -> str | None:
    if candidate != SELF_MAPPINGS_TOKEN:
        return f"The syntax should be the keyword: {SELF_MAPPINGS_TOKEN}"
    facts.url_formatting_mappings = facts.identity_mappings()
    return None


def _validate_as_body(candidate: str | None, facts: FactContext) -> str | None:
    if candidate != AS_BODY_TOKEN:
        return f"The syntax should be the keyword: {AS_BODY_TOKEN}"
    facts.body_mappings = facts.identity_mappings()
    return None
