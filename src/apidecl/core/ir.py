"""
Data model for apidecl declarations.

A declaration is a parenthesized expression such as::

    (Rest/get /users/:id/posts?:deleted selfMappings)

This module defines the grammar vocabulary (syntax categories and
argument specs), the per-compilation fact context, compilation results,
and the request descriptors the evaluator hands to collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Grammar vocabulary
# ---------------------------------------------------------------------------


class SyntaxCategory(StrEnum):
    """Closed set of argument syntax categories."""

    URL = "type/url"
    STRING = "type/string"
    MAP = "type/map"
    ONE_OF = "one-of"
    SELF_MAPPINGS = "fn/selfMappings"
    AS_BODY = "fn/asBody"


class ArgumentSpec(BaseModel):
    """
    Specification of one positional argument of a keyword.

    Either a single category (``(type/url)``) or a choice among
    categories (``(one-of type/map fn/selfMappings)``).
    """

    category: SyntaxCategory
    options: tuple[SyntaxCategory, ...] = Field(
        default=(), description="Candidate categories for ONE_OF"
    )

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        parts = [self.category.value, *(o.value for o in self.options)]
        return f"({' '.join(parts)})"


class HttpMethod(StrEnum):
    """HTTP methods a Rest/* keyword can resolve to."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


@dataclass
class FactContext:
    """
    Facts derived while validating one declaration.

    Validators mutate this in place. A map literal assigns the same dict
    to both ``url_formatting_mappings`` and ``body_mappings``.
    """

    req_data_keys: list[str]
    url_formatting_mappings: dict[str, str] | None = None
    body_mappings: dict[str, str] | None = None

    def identity_mappings(self) -> dict[str, str]:
        """Map every known request field to itself."""
        return {key: key for key in self.req_data_keys}


class ApiDefinition(BaseModel):
    """A declaration and its request field names, as found in source text."""

    declaration: str
    req_data_keys: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class CompilationResult(BaseModel):
    """Outcome of compiling one declaration. ``error`` is None on success."""

    declaration: str
    req_data_keys: list[str] = Field(default_factory=list)
    error: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Request descriptors
# ---------------------------------------------------------------------------


class RestCall(BaseModel):
    """A concrete REST call resolved from a Rest/* declaration."""

    kind: Literal["rest"] = "rest"
    method: HttpMethod
    url: str
    body: dict[str, Any] | None = None

    model_config = ConfigDict(frozen=True)


class StorageOp(BaseModel):
    """A local storage read or write resolved from a Local/* declaration."""

    kind: Literal["storage"] = "storage"
    key: str
    is_write: bool = False
    data: dict[str, Any] | None = None

    model_config = ConfigDict(frozen=True)


RequestDescriptor = Annotated[RestCall | StorageOp, Field(discriminator="kind")]
