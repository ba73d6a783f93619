"""
apidecl core: declaration model, extraction, grammar validation, and compilation.

Usage:
    from apidecl.core import Compiler, validate_source

    results = validate_source(source_text)
    compiler = Compiler()
    compiler.compile_source(source_text)
"""

from apidecl.core.cache import CACHE_MISS_MESSAGE, CompiledFactCache
from apidecl.core.compiler import (
    INVALID_KEYWORD,
    Compiler,
    compile_declaration,
    compile_definitions,
    derive_facts,
    validate_source,
)
from apidecl.core.extractor import extract_definitions
from apidecl.core.lexer import split_declaration

__all__ = [
    "CACHE_MISS_MESSAGE",
    "INVALID_KEYWORD",
    "CompiledFactCache",
    "Compiler",
    "compile_declaration",
    "compile_definitions",
    "derive_facts",
    "extract_definitions",
    "split_declaration",
    "validate_source",
]
