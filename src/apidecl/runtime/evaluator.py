"""
Declaration evaluator.

Resolves a compiled declaration plus a data payload into a concrete
request descriptor, then hands it to the configured transport or storage.

    evaluator = Evaluator(cache, transport, storage)
    posts = evaluator.evaluate(
        "(Rest/get /users/:id/posts?:deleted selfMappings)",
        {"id": 234, "deleted": False},
    )
    # transport receives ("/users/234/posts?deleted=false", HttpMethod.GET, None)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from apidecl.core.cache import CompiledFactCache
from apidecl.core.compiler import derive_facts
from apidecl.core.errors import EvaluationError, SetupError
from apidecl.core.grammar import LOCAL_GET_IN, LOCAL_SET_IN, REST_METHODS
from apidecl.core.ir import FactContext, HttpMethod, RequestDescriptor, RestCall, StorageOp
from apidecl.core.lexer import split_declaration
from apidecl.runtime.storage import StorageBackend
from apidecl.runtime.transports import RestTransport

logger = logging.getLogger(__name__)

SETUP_MESSAGE = (
    "Both a REST transport and a storage backend are required. "
    "Pass them to load_all in your entrypoint."
)


class Evaluator:
    """Evaluates compiled declarations against injected collaborators."""

    def __init__(
        self,
        cache: CompiledFactCache,
        transport: RestTransport | None,
        storage: StorageBackend | None,
    ) -> None:
        if transport is None or storage is None:
            raise SetupError(SETUP_MESSAGE)
        self.cache = cache
        self.transport = transport
        self.storage = storage

    def resolve(
        self, declaration: str, payload: Mapping[str, Any] | None = None
    ) -> RequestDescriptor:
        """Build the request descriptor for a declaration without sending it."""
        return resolve_request(self.cache, declaration, payload)

    def evaluate(self, declaration: str, payload: Mapping[str, Any] | None = None) -> Any:
        """Resolve a declaration and perform it.

        Local/set-in hands the caller's payload object itself to storage.

        Returns:
            The transport's response for Rest/*, the stored value for
            Local/get-in, and None for Local/set-in.
        """
        request = self.resolve(declaration, payload)
        logger.debug("Resolved %s to %r", declaration, request)

        if isinstance(request, RestCall):
            return self.transport(request.url, request.method, request.body)

        if request.is_write:
            self.storage.store(request.key, payload)
            return None
        return self.storage.retrieve(request.key)


def resolve_request(
    cache: CompiledFactCache,
    declaration: str,
    payload: Mapping[str, Any] | None = None,
) -> RequestDescriptor:
    """Resolve a compiled declaration and payload into a request descriptor.

    Mappings are re-derived from the cached request field names on every
    call; only the field names are kept from compile time.

    Raises:
        DeclarationNotCompiledError: If the declaration was never compiled.
        CompilationError: If the cached declaration no longer compiles.
        EvaluationError: If the payload cannot satisfy the declaration.
    """
    facts = derive_facts(declaration, cache.lookup(declaration))
    keyword, args = split_declaration(declaration)
    data = dict(payload or {})

    method = REST_METHODS.get(keyword)
    if method is not None:
        return _resolve_rest(method, args, data, facts)

    if keyword == LOCAL_GET_IN:
        return StorageOp(key=_storage_key(args))

    if keyword == LOCAL_SET_IN:
        if not data:
            raise EvaluationError("Data should not be null on store operation.")
        return StorageOp(key=_storage_key(args), is_write=True, data=data)

    raise EvaluationError(f"No resolver for keyword: {keyword}")


def _resolve_rest(
    method: HttpMethod,
    args: list[str],
    data: dict[str, Any],
    facts: FactContext,
) -> RestCall:
    if not args:
        raise EvaluationError("The url should not be null")

    url = format_url(args[0], facts.url_formatting_mappings, data)
    if method == HttpMethod.GET:
        return RestCall(method=method, url=url)
    return RestCall(method=method, url=url, body=to_request_body(facts.body_mappings, data))


def _storage_key(args: list[str]) -> str:
    if not args:
        raise EvaluationError("The key should not be null.")
    return args[0]


def format_url(
    template: str,
    mappings: Mapping[str, str] | None,
    data: Mapping[str, Any],
) -> str:
    """Fill a URL template from the payload.

    ``:name`` in the path becomes the value; in the query it becomes
    ``name=value``. Values are read from the payload under the mapping
    key (the placeholder name), not the mapped field name. Only the first
    occurrence of each placeholder is replaced.
    """
    parts = template.split("?")
    path = parts[0]
    query = parts[1] if len(parts) > 1 else None

    for key in mappings or {}:
        value = format_value(data.get(key))
        path = path.replace(f":{key}", value, 1)
        if query:
            query = query.replace(f":{key}", f"{key}={value}", 1)

    return f"{path}?{query}" if query else path


def to_request_body(
    mappings: Mapping[str, str] | None, data: Mapping[str, Any]
) -> dict[str, Any]:
    """Body with each mapping key that is present in the payload."""
    return {key: data[key] for key in mappings or {} if key in data}


def format_value(value: Any) -> str:
    """Render a payload value for a URL: booleans lowercase, None as ``null``."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
