"""
apidecl runtime: resolve compiled declarations into REST calls and storage operations.

Usage:
    from apidecl.runtime import InMemoryStorage, HttpxTransport, load_all

    evaluator = load_all(Path("data/api"), HttpxTransport("http://api"), InMemoryStorage())
    evaluator.evaluate("(Local/set-in user-profile)", {"id": 1})
"""

from apidecl.runtime.evaluator import Evaluator, format_url, resolve_request, to_request_body
from apidecl.runtime.loader import compile_directory, load_all, load_from_cache, load_project
from apidecl.runtime.storage import InMemoryStorage, JsonFileStorage, StorageBackend
from apidecl.runtime.transports import HttpxTransport, RestTransport

__all__ = [
    "Evaluator",
    "HttpxTransport",
    "InMemoryStorage",
    "JsonFileStorage",
    "RestTransport",
    "StorageBackend",
    "compile_directory",
    "format_url",
    "load_all",
    "load_from_cache",
    "load_project",
    "resolve_request",
    "to_request_body",
]
