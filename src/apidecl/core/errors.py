"""
Error types for apidecl extraction, compilation, setup, and evaluation.

Grammar violations are not exceptions: the compiler reports them on
``CompilationResult.error``. The types below are raised at the seams
where a caller cannot continue (batch loading, evaluation, setup).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from apidecl.core.ir import CompilationResult


class ApiDeclError(Exception):
    """Base exception for all apidecl errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ExtractionError(ApiDeclError):
    """
    Raised when a declaration cannot be isolated from source text.

    A file with no declarations at all is not an error; this is only
    raised when a definition was found but its declaration was malformed.
    """

    pass


class CompilationError(ApiDeclError):
    """
    Raised when a batch of declarations fails to compile.

    Examples:
    - Unknown keyword in a scanned declaration file
    - A cached declaration that no longer compiles when re-deriving facts
    """

    def __init__(
        self,
        message: str,
        result: "CompilationResult | None" = None,
        context: Optional["ErrorContext"] = None,
    ):
        self.result = result
        super().__init__(message, context)


class DeclarationNotCompiledError(ApiDeclError):
    """Raised when a declaration is looked up before it was compiled."""

    pass


class SetupError(ApiDeclError):
    """
    Raised when the runtime is used before it is fully set up.

    Examples:
    - Declaration directory does not exist
    - Transport or storage collaborator missing
    """

    pass


class EvaluationError(ApiDeclError):
    """
    Raised when a compiled declaration cannot be evaluated with the given data.

    Examples:
    - Local/set-in called without data
    - URL template argument missing at resolution time
    """

    pass


class ConfigError(ApiDeclError):
    """Raised when apidecl.toml cannot be read."""

    pass


@dataclass
class ErrorContext:
    """
    Where an error came from.

    Attributes:
        file: Source file the declaration was read from
        declaration: Declaration text involved in the error
    """

    file: Path | None = None
    declaration: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "data/api/users.ts: (Rest/get /users selfMappings)"
        """
        parts = []
        if self.file:
            parts.append(str(self.file))
        if self.declaration:
            parts.append(self.declaration)
        return ": ".join(parts)


def make_compilation_error(
    result: "CompilationResult",
    file: Path | None = None,
) -> CompilationError:
    """
    Helper to create a CompilationError for a failed compilation result.

    Args:
        result: The first failing compilation result of a batch
        file: Optional source file the batch was read from

    Returns:
        CompilationError with the result attached
    """
    message = f"ERROR: {result.model_dump_json()}"
    context = ErrorContext(file=file) if file else None
    return CompilationError(message, result=result, context=context)
