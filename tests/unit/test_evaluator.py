"""Tests for resolving and evaluating compiled declarations."""

from __future__ import annotations

import pytest

from apidecl.core.cache import CACHE_MISS_MESSAGE, CompiledFactCache
from apidecl.core.compiler import Compiler
from apidecl.core.errors import DeclarationNotCompiledError, EvaluationError, SetupError
from apidecl.core.ir import HttpMethod, RestCall, StorageOp
from apidecl.runtime.evaluator import Evaluator, format_url, format_value, to_request_body
from apidecl.runtime.storage import InMemoryStorage

from .conftest import RecordingStorage, RecordingTransport

GET_POSTS = "(Rest/get /users/:id/posts?:deleted&:dateGreaterThan selfMappings)"
ADD_POST = "(Rest/post /users/:id/posts selfMappings asBody (Add post of the user))"
DELETE_POST = "(Rest/delete /users/:id/posts/:postId selfMappings asBody (Delete the post of the user))"
UPDATE_POST = "(Rest/put /users/:id/posts/:postId selfMappings asBody (update the post)"
PATCH_POST = "(Rest/patch /users/:id/posts/:postId?:titleOnly selfMappings asBody (patching the post)"
GET_PROFILE = "(Local/get-in user-profile (get the profile of the user))"
SET_PROFILE = "(Local/set-in user-profile (set the profile of the user))"


@pytest.fixture
def cache(users_source: str) -> CompiledFactCache:
    compiler = Compiler()
    compiler.compile_source(users_source)
    return compiler.cache


@pytest.fixture
def evaluator(
    cache: CompiledFactCache, transport: RecordingTransport, storage: RecordingStorage
) -> Evaluator:
    return Evaluator(cache, transport, storage)


class TestSetup:
    def test_requires_transport(self, cache: CompiledFactCache) -> None:
        with pytest.raises(SetupError):
            Evaluator(cache, None, InMemoryStorage())

    def test_requires_storage(self, cache: CompiledFactCache, transport: RecordingTransport) -> None:
        with pytest.raises(SetupError):
            Evaluator(cache, transport, None)

    def test_not_compiled(self, evaluator: Evaluator) -> None:
        with pytest.raises(DeclarationNotCompiledError) as exc_info:
            evaluator.evaluate("(Rest/get /users/:id/posts?:deleted selfMappings)", {"id": 234})
        assert str(exc_info.value) == CACHE_MISS_MESSAGE


class TestRest:
    def test_get(self, evaluator: Evaluator, transport: RecordingTransport) -> None:
        res = evaluator.evaluate(GET_POSTS, {"id": 234, "deleted": False, "dateGreaterThan": "test"})
        assert res == {"id": 234, "name": "himly", "age": "24"}
        assert transport.calls == [
            ("/users/234/posts?deleted=false&dateGreaterThan=test", HttpMethod.GET, None)
        ]

    def test_post(self, evaluator: Evaluator, transport: RecordingTransport) -> None:
        res = evaluator.evaluate(ADD_POST, {"id": 234})
        assert res == {"id": 234, "name": "himly", "age": "24"}
        assert transport.calls == [("/users/234/posts", HttpMethod.POST, {"id": 234})]

    def test_delete(self, evaluator: Evaluator, transport: RecordingTransport) -> None:
        evaluator.evaluate(DELETE_POST, {"id": 445, "postId": 234})
        assert transport.calls == [
            ("/users/445/posts/234", HttpMethod.DELETE, {"id": 445, "postId": 234})
        ]

    def test_put(self, evaluator: Evaluator, transport: RecordingTransport) -> None:
        evaluator.evaluate(UPDATE_POST, {"id": 445, "postId": 234})
        assert transport.calls == [
            ("/users/445/posts/234", HttpMethod.PUT, {"id": 445, "postId": 234})
        ]

    def test_patch(self, evaluator: Evaluator, transport: RecordingTransport) -> None:
        evaluator.evaluate(PATCH_POST, {"id": 445, "postId": 234, "titleOnly": False})
        assert transport.calls == [
            (
                "/users/445/posts/234?titleOnly=false",
                HttpMethod.PATCH,
                {"id": 445, "postId": 234, "titleOnly": False},
            )
        ]

    def test_resolve_does_not_send(self, evaluator: Evaluator, transport: RecordingTransport) -> None:
        request = evaluator.resolve(ADD_POST, {"id": 1, "title": "t"})
        assert request == RestCall(method=HttpMethod.POST, url="/users/1/posts", body={"id": 1, "title": "t"})
        assert transport.calls == []


class TestCustomMappings:
    """Payload values are read under the placeholder name, not the mapped field."""

    def test_map_literal_reads_payload_by_mapping_key(self, transport: RecordingTransport) -> None:
        declaration = "(Rest/post /users/:id/posts {:id userId} asBody)"
        compiler = Compiler()
        compiler.compile_source(f'"{declaration}": {{req: {{userId: number, title: string}}}}')
        evaluator = Evaluator(compiler.cache, transport, InMemoryStorage())

        request = evaluator.resolve(declaration, {"id": 7, "userId": 99, "title": "t"})
        assert isinstance(request, RestCall)
        assert request.url == "/users/7/posts"
        # The map at position 2 is validated after asBody and replaces the body mapping too
        assert request.body == {"id": 7}

    def test_url_map_replaces_body_map(self, transport: RecordingTransport) -> None:
        declaration = "(Rest/put /users/:id {:id userId} {:name fullName})"
        compiler = Compiler()
        compiler.compile_source(f'"{declaration}": {{req: {{userId: number, fullName: string}}}}')
        evaluator = Evaluator(compiler.cache, transport, InMemoryStorage())

        request = evaluator.resolve(declaration, {"id": 3, "userId": 1, "name": "n"})
        assert isinstance(request, RestCall)
        assert request.url == "/users/3"
        assert request.body == {"id": 3}

    def test_missing_payload_value(self, transport: RecordingTransport) -> None:
        declaration = "(Rest/get /users/:id {:id userId})"
        compiler = Compiler()
        compiler.compile_source(f'"{declaration}": {{req: {{userId: number}}}}')
        evaluator = Evaluator(compiler.cache, transport, InMemoryStorage())

        request = evaluator.resolve(declaration, {"userId": 1})
        assert isinstance(request, RestCall)
        assert request.url == "/users/null"
        assert request.body is None


class TestLocal:
    def test_get_in(self, evaluator: Evaluator, storage: RecordingStorage) -> None:
        assert evaluator.evaluate(GET_PROFILE, {}) == {"test": True}
        assert storage.retrieved == ["user-profile"]

    def test_set_in(self, evaluator: Evaluator, storage: RecordingStorage) -> None:
        payload = {"id": 234, "name": "himly", "age": 24}
        assert evaluator.evaluate(SET_PROFILE, payload) is None
        assert storage.stored == [("user-profile", {"id": 234, "name": "himly", "age": 24})]

    def test_set_in_stores_caller_payload_object(
        self, evaluator: Evaluator, storage: RecordingStorage
    ) -> None:
        payload = {"id": 1}
        evaluator.evaluate(SET_PROFILE, payload)
        assert storage.stored[0][1] is payload

    def test_set_in_passes_unlisted_fields(self, evaluator: Evaluator, storage: RecordingStorage) -> None:
        evaluator.evaluate(SET_PROFILE, {"extra": 1})
        assert storage.stored == [("user-profile", {"extra": 1})]

    @pytest.mark.parametrize("payload", [None, {}])
    def test_set_in_requires_data(
        self, evaluator: Evaluator, storage: RecordingStorage, payload: dict | None
    ) -> None:
        with pytest.raises(EvaluationError, match="Data should not be null on store operation."):
            evaluator.evaluate(SET_PROFILE, payload)
        assert storage.stored == []

    def test_resolve_storage_op(self, evaluator: Evaluator) -> None:
        assert evaluator.resolve(GET_PROFILE) == StorageOp(key="user-profile")

    def test_round_trip_in_memory(self, cache: CompiledFactCache, transport: RecordingTransport) -> None:
        evaluator = Evaluator(cache, transport, InMemoryStorage())
        evaluator.evaluate(SET_PROFILE, {"id": 1})
        assert evaluator.evaluate(GET_PROFILE) == {"id": 1}


class TestFormatting:
    def test_format_url_path_and_query(self) -> None:
        url = format_url("/a/:x?:y", {"x": "x", "y": "y"}, {"x": 1, "y": True})
        assert url == "/a/1?y=true"

    def test_format_url_without_mappings(self) -> None:
        assert format_url("/system/roles", None, {}) == "/system/roles"

    def test_format_url_first_occurrence_only(self) -> None:
        assert format_url("/a/:x/:x", {"x": "x"}, {"x": 5}) == "/a/5/:x"

    def test_to_request_body_skips_absent_fields(self) -> None:
        assert to_request_body({"a": "a", "b": "b"}, {"a": 1, "c": 3}) == {"a": 1}

    def test_to_request_body_keeps_none_values(self) -> None:
        assert to_request_body({"a": "a"}, {"a": None}) == {"a": None}

    @pytest.mark.parametrize(
        "value,expected",
        [(None, "null"), (True, "true"), (False, "false"), (0, "0"), (1.5, "1.5"), ("s", "s")],
    )
    def test_format_value(self, value: object, expected: str) -> None:
        assert format_value(value) == expected
