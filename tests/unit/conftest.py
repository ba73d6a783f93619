"""Shared pytest fixtures for apidecl unit tests."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from apidecl.core.ir import HttpMethod

USERS_SOURCE = """\
type BasicResponse<T> = {
    success: boolean,
    message: string
    data: T
}
export type Users = {
    "(Rest/get /users/:id/posts?:deleted&:dateGreaterThan selfMappings)": {
        req: {
            id: number,
            deleted: boolean,
            dateGreaterThan: string
        },
        res: BasicResponse<{
            id: number,
            title: string,
            content: string
        }[]>
    },
    "(Rest/post /users/:id/posts selfMappings asBody (Add post of the user))": {
        req: {
            id: number,
            title: string,
            content: string
        },
        res: BasicResponse<any>
    },
    "(Rest/delete /users/:id/posts/:postId selfMappings asBody (Delete the post of the user))": {
        req: {
            id: number,
            postId: number
        },
        res: BasicResponse<any>
    },
    "(Rest/put /users/:id/posts/:postId selfMappings asBody (update the post)": {
        req: {
           id: number,
           postId: number,
           title: string,
           content: string
        },
        res: BasicResponse<any>
    },
    "(Rest/patch /users/:id/posts/:postId?:titleOnly selfMappings asBody (patching the post)": {
        req: {
            id: number,
            postId: number,
            titleOnly: boolean,
            title: string,
            content: string
        },
        res: BasicResponse<any>
    },
    "(Local/get-in user-profile (get the profile of the user))": {
        req: {
        },
        res: {
            id?: number,
            name?: string,
            age?: number
        }
    },
    "(Local/set-in user-profile (set the profile of the user))": {
        req: {
            id?: number,
            name?: string,
            age?: number
        },
        res: {
        }
    }
}
"""


class RecordingTransport:
    """Transport that records calls and returns a canned response."""

    def __init__(self, response: Any = None) -> None:
        self.response = response if response is not None else {}
        self.calls: list[tuple[str, HttpMethod, dict[str, Any] | None]] = []

    def __call__(
        self, url: str, method: HttpMethod, body: dict[str, Any] | None = None
    ) -> Any:
        self.calls.append((url, method, body))
        return self.response


class RecordingStorage:
    """Storage that records calls and returns a canned value."""

    def __init__(self, value: Any = None) -> None:
        self.value = value
        self.stored: list[tuple[str, Mapping[str, Any]]] = []
        self.retrieved: list[str] = []

    def store(self, key: str, data: Mapping[str, Any]) -> None:
        self.stored.append((key, data))

    def retrieve(self, key: str) -> Any:
        self.retrieved.append(key)
        return self.value


@pytest.fixture
def users_source() -> str:
    """Return source text declaring one endpoint per keyword."""
    return USERS_SOURCE


@pytest.fixture
def api_dir(tmp_path: Path) -> Path:
    """Create a declaration directory holding the users source."""
    directory = tmp_path / "data" / "api"
    directory.mkdir(parents=True)
    (directory / "users.ts").write_text(USERS_SOURCE, encoding="utf-8")
    return directory


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport({"id": 234, "name": "himly", "age": "24"})


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage({"test": True})
