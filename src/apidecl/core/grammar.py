"""
Keyword grammar table.

Each keyword maps to an ordered tuple of argument specs, one per
position. The table is fixed; keywords cannot be registered at runtime.
"""

from __future__ import annotations

from types import MappingProxyType

from apidecl.core.ir import ArgumentSpec, HttpMethod, SyntaxCategory

URL = ArgumentSpec(category=SyntaxCategory.URL)
STRING = ArgumentSpec(category=SyntaxCategory.STRING)
URL_MAPPINGS = ArgumentSpec(
    category=SyntaxCategory.ONE_OF,
    options=(SyntaxCategory.MAP, SyntaxCategory.SELF_MAPPINGS),
)
BODY_MAPPINGS = ArgumentSpec(
    category=SyntaxCategory.ONE_OF,
    options=(SyntaxCategory.MAP, SyntaxCategory.AS_BODY),
)

REST_GET = "Rest/get"
REST_POST = "Rest/post"
REST_DELETE = "Rest/delete"
REST_PUT = "Rest/put"
REST_PATCH = "Rest/patch"
LOCAL_GET_IN = "Local/get-in"
LOCAL_SET_IN = "Local/set-in"

KEYWORD_GRAMMARS: MappingProxyType[str, tuple[ArgumentSpec, ...]] = MappingProxyType(
    {
        REST_GET: (URL, URL_MAPPINGS),
        REST_POST: (URL, URL_MAPPINGS, BODY_MAPPINGS),
        REST_DELETE: (URL, URL_MAPPINGS, BODY_MAPPINGS),
        REST_PUT: (URL, URL_MAPPINGS, BODY_MAPPINGS),
        REST_PATCH: (URL, URL_MAPPINGS, BODY_MAPPINGS),
        LOCAL_GET_IN: (STRING,),
        LOCAL_SET_IN: (STRING,),
    }
)

# Rest/* keywords and the HTTP method each one sends
REST_METHODS: MappingProxyType[str, HttpMethod] = MappingProxyType(
    {
        REST_GET: HttpMethod.GET,
        REST_POST: HttpMethod.POST,
        REST_DELETE: HttpMethod.DELETE,
        REST_PUT: HttpMethod.PUT,
        REST_PATCH: HttpMethod.PATCH,
    }
)


def get_grammar(keyword: str) -> tuple[ArgumentSpec, ...] | None:
    """Return the argument specs for a keyword, or None if unknown."""
    return KEYWORD_GRAMMARS.get(keyword)
