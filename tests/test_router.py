"""Tests for wayline.routing.router: the ordered path table."""

import pytest

from wayline.errors import ConfigurationError, MethodNotAllowed, NotFound
from wayline.routing.route import Route
from wayline.routing.router import Router, split_path


def _handler() -> str:
    return "ok"


def _route(path: str, methods: frozenset[str] | None = None) -> Route:
    return Route(path=path, handler=_handler, methods=methods or frozenset({"GET"}))


class TestSplitPath:
    def test_segments(self) -> None:
        assert split_path("/api/v2/users") == ("api", "v2", "users")

    def test_root(self) -> None:
        assert split_path("/") == ()

    def test_empty_segments_dropped(self) -> None:
        assert split_path("//a///b/") == ("a", "b")


class TestRouterMatch:
    def test_root(self) -> None:
        match = Router([_route("/")]).match("GET", "/")
        assert match.path_params == {}

    def test_static(self) -> None:
        router = Router([_route("/users"), _route("/posts")])
        assert router.match("GET", "/users").route.path == "/users"
        assert router.match("GET", "/posts").route.path == "/posts"

    def test_trailing_slash_ignored(self) -> None:
        assert Router([_route("/users")]).match("GET", "/users/").route.path == "/users"

    def test_params(self) -> None:
        router = Router([_route("/users/{user_id}/posts/{post_id}")])
        match = router.match("GET", "/users/7/posts/9")
        assert match.path_params == {"user_id": "7", "post_id": "9"}

    def test_registration_order_wins(self) -> None:
        router = Router([_route("/users/{name}"), _route("/users/me")])
        assert router.match("GET", "/users/me").route.path == "/users/{name}"

    def test_not_found(self) -> None:
        with pytest.raises(NotFound):
            Router([_route("/users")]).match("GET", "/posts")

    def test_length_mismatch_not_found(self) -> None:
        with pytest.raises(NotFound):
            Router([_route("/users/{id}")]).match("GET", "/users/1/extra")

    def test_method_not_allowed(self) -> None:
        router = Router([_route("/users", frozenset({"GET", "POST"}))])
        with pytest.raises(MethodNotAllowed) as exc_info:
            router.match("DELETE", "/users")
        assert ("Allow", "GET, POST") in exc_info.value.headers

    def test_head_falls_back_to_get(self) -> None:
        assert Router([_route("/")]).match("HEAD", "/").route.path == "/"

    def test_method_collected_across_routes(self) -> None:
        router = Router([
            _route("/items", frozenset({"GET"})),
            _route("/items", frozenset({"POST"})),
        ])
        assert router.match("POST", "/items").route.methods == frozenset({"POST"})

    def test_len(self) -> None:
        assert len(Router([_route("/a"), _route("/b")])) == 2


class TestRouterValidation:
    def test_rejects_flask_style_param(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            Router([_route("/share/<slug>")])
        assert "<param>" in str(exc_info.value)
        assert "{param}" in str(exc_info.value)
        assert "/share/<slug>" in str(exc_info.value)
