"""
apidecl - API endpoints declared as symbolic expressions.

Declarations such as ``(Rest/get /users/:id selfMappings)`` are extracted
from source files, validated against a fixed per-keyword grammar, and
resolved at call time into REST calls or local storage operations.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.cache import CompiledFactCache
from .core.compiler import Compiler, validate_source
from .core.errors import (
    ApiDeclError,
    CompilationError,
    ConfigError,
    DeclarationNotCompiledError,
    EvaluationError,
    ExtractionError,
    SetupError,
)
from .runtime import Evaluator, load_all, load_from_cache

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "ApiDeclError",
    "CompilationError",
    "CompiledFactCache",
    "Compiler",
    "ConfigError",
    "DeclarationNotCompiledError",
    "EvaluationError",
    "Evaluator",
    "ExtractionError",
    "SetupError",
    "load_all",
    "load_from_cache",
    "validate_source",
]
