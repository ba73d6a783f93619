"""
Bulk loading: compile a declaration directory and set up an evaluator.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from apidecl.core.cache import CompiledFactCache
from apidecl.core.compiler import Compiler
from apidecl.core.errors import ErrorContext, SetupError
from apidecl.core.fileset import discover_declaration_files
from apidecl.core.manifest import ProjectManifest
from apidecl.runtime.evaluator import SETUP_MESSAGE, Evaluator
from apidecl.runtime.storage import JsonFileStorage, StorageBackend
from apidecl.runtime.transports import HttpxTransport, RestTransport

logger = logging.getLogger(__name__)

MISSING_API_DIR_MESSAGE = (
    "ERROR: Add the declaration directory to your project root folder before compiling."
)


def compile_directory(
    api_dir: Path,
    suffixes: Sequence[str] = (".ts",),
    cache: CompiledFactCache | None = None,
) -> CompiledFactCache:
    """
    Compile every declaration file under a directory.

    Args:
        api_dir: Declaration source directory
        suffixes: File suffixes to scan
        cache: Cache to populate; a new one is created if omitted

    Returns:
        The populated cache

    Raises:
        SetupError: If the directory does not exist
        CompilationError: If any declaration fails to compile
    """
    if not api_dir.exists():
        raise SetupError(MISSING_API_DIR_MESSAGE, ErrorContext(file=api_dir))

    compiler = Compiler(cache)
    files = discover_declaration_files(api_dir, suffixes)
    logger.debug("Compiling %d declaration files under %s", len(files), api_dir)
    compiler.compile_files(files)
    return compiler.cache


def load_all(
    api_dir: Path,
    transport: RestTransport | None,
    storage: StorageBackend | None,
    suffixes: Sequence[str] = (".ts",),
) -> Evaluator:
    """
    Compile a declaration directory and return a ready evaluator.

    Raises:
        SetupError: If a collaborator is missing or the directory does not exist
        CompilationError: If any declaration fails to compile
    """
    if transport is None or storage is None:
        raise SetupError(SETUP_MESSAGE)
    cache = compile_directory(api_dir, suffixes)
    return Evaluator(cache, transport, storage)


def load_from_cache(
    cache_path: Path,
    transport: RestTransport | None,
    storage: StorageBackend | None,
) -> Evaluator:
    """Set up an evaluator from a cache saved by ``apidecl compile``."""
    return Evaluator(CompiledFactCache.load(cache_path), transport, storage)


def load_project(manifest: ProjectManifest) -> Evaluator:
    """Compile a project's declarations with the collaborators its manifest configures."""
    transport = HttpxTransport(
        base_url=manifest.transport.base_url,
        timeout=manifest.transport.timeout,
        headers=manifest.transport.headers,
    )
    storage = JsonFileStorage(manifest.storage_dir)
    return load_all(manifest.api_dir, transport, storage, manifest.api.suffixes)
