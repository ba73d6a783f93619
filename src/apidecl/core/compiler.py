"""
Declaration compiler.

Validates each declaration's arguments against its keyword grammar and
records compiled declarations in a :class:`CompiledFactCache`.

Validation runs in reverse argument order. Later arguments (a map
literal, ``selfMappings``, ``asBody``) establish the mappings that the
URL argument at position 0 is checked against, so they must run first.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from apidecl.core.cache import CompiledFactCache
from apidecl.core.errors import CompilationError, ErrorContext, make_compilation_error
from apidecl.core.extractor import extract_definitions
from apidecl.core.grammar import get_grammar
from apidecl.core.ir import ApiDefinition, CompilationResult, FactContext
from apidecl.core.lexer import split_declaration
from apidecl.core.validators import validate_argument

logger = logging.getLogger(__name__)

INVALID_KEYWORD = "Invalid keyword."


def compile_declaration(
    declaration: str,
    req_data_keys: Sequence[str],
    facts: FactContext | None = None,
) -> CompilationResult:
    """Validate one declaration against its keyword grammar.

    Args:
        declaration: Declaration text, e.g. ``(Rest/get /users/:id selfMappings)``.
        req_data_keys: Request field names known for this declaration.
        facts: Fact context to populate. A fresh one is used if omitted.

    Returns:
        The compilation result; ``error`` is None when every argument passes.
    """
    keys = list(req_data_keys)
    if facts is None:
        facts = FactContext(req_data_keys=keys)

    keyword, args = split_declaration(declaration)
    grammar = get_grammar(keyword)
    if grammar is None:
        return CompilationResult(declaration=declaration, req_data_keys=keys, error=INVALID_KEYWORD)

    # Reverse-positional order: mapping arguments feed the URL check.
    for position in range(len(grammar) - 1, -1, -1):
        candidate = args[position] if position < len(args) else None
        error = validate_argument(candidate, grammar[position], facts)
        if error:
            # The "st" suffix is fixed for every position.
            return CompilationResult(
                declaration=declaration,
                req_data_keys=keys,
                error=f"Error on the {position + 1}st argument: {error}",
            )

    return CompilationResult(declaration=declaration, req_data_keys=keys)


def compile_definitions(definitions: Sequence[ApiDefinition]) -> list[CompilationResult]:
    """Compile every definition, in order, without touching any cache."""
    return [compile_declaration(d.declaration, d.req_data_keys) for d in definitions]


def validate_source(source: str) -> list[CompilationResult]:
    """Extract and compile all declarations in a text blob.

    Returns the full list of results, failures included. No cache is
    modified.
    """
    return compile_definitions(extract_definitions(source))


def derive_facts(declaration: str, req_data_keys: Sequence[str]) -> FactContext:
    """Recompute the fact context of a declaration.

    Raises:
        CompilationError: If the declaration does not compile.
    """
    facts = FactContext(req_data_keys=list(req_data_keys))
    result = compile_declaration(declaration, req_data_keys, facts)
    if result.error:
        raise CompilationError(
            f"ERROR when compiling the declaration: {result.model_dump_json()}",
            result=result,
            context=ErrorContext(declaration=declaration),
        )
    return facts


class Compiler:
    """Compiles declaration batches into a compiled-fact cache."""

    def __init__(self, cache: CompiledFactCache | None = None):
        self.cache = cache if cache is not None else CompiledFactCache()

    def compile_source(self, source: str, file: Path | None = None) -> list[CompilationResult]:
        """
        Compile one source unit and cache its declarations.

        Every declaration is validated first. If any fails, the first
        failure is raised and nothing from this unit is cached.

        Args:
            source: Source text holding declarations
            file: Optional path the text was read from, for error context

        Returns:
            Results for every declaration in the unit

        Raises:
            CompilationError: If any declaration fails to compile
            ExtractionError: If a declaration cannot be isolated
        """
        results = validate_source(source)

        failure = next((r for r in results if r.error is not None), None)
        if failure is not None:
            logger.error("Compilation failed for %s: %s", failure.declaration, failure.error)
            raise make_compilation_error(failure, file)

        for result in results:
            self.cache.store(result.declaration, result.req_data_keys)
            logger.info("%s compiled successfully", result.declaration)

        if not results and file is not None:
            logger.warning("No api definition found in %s", file)

        return results

    def compile_files(self, files: Sequence[Path]) -> list[CompilationResult]:
        """Compile each file in turn, stopping at the first failing file."""
        results: list[CompilationResult] = []
        for path in files:
            source = path.read_text(encoding="utf-8")
            results.extend(self.compile_source(source, file=path))
        return results

    def get_facts(self, declaration: str) -> FactContext:
        """
        Fact context of a compiled declaration.

        Mappings are recomputed from the cached request field names.

        Raises:
            DeclarationNotCompiledError: If the declaration is not cached
            CompilationError: If it no longer compiles
        """
        return derive_facts(declaration, self.cache.lookup(declaration))
