"""Integration checks for recording Starlette test traffic into a blueprint."""
from __future__ import annotations

import io
import json

from starlette.applications import Starlette
from starlette.endpoints import HTTPEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route
from starlette.testclient import TestClient

from blueprint.capture import Recorder
from blueprint.records import EMPTY, SourceIdentity, from_assertion, resolve_route
from blueprint.writer.render import render_document


class UserController(HTTPEndpoint):
    async def get(self, request: Request) -> Response:
        user_id = request.path_params["id"]
        if user_id != 1:
            return JSONResponse({"error": "not found"}, status_code=404)
        return JSONResponse({"id": 1, "name": "Ada"})

    async def delete(self, request: Request) -> Response:
        return Response(status_code=204)


async def list_posts(request: Request) -> Response:
    return JSONResponse([{"id": 1, "user": request.path_params["user_id"]}])


async def create_post(request: Request) -> Response:
    payload = await request.json()
    return JSONResponse({"id": 2, **payload}, status_code=201)


def _make_app() -> Starlette:
    return Starlette(
        routes=[
            Route("/users/{id:int}", UserController),
            Mount(
                "/api",
                routes=[
                    Route("/users/{user_id}/posts", list_posts, methods=["GET"]),
                    Route("/users/{user_id}/posts", create_post, methods=["POST"]),
                ],
            ),
        ]
    )


def test_recorder_resolves_route_identity_and_params() -> None:
    app = _make_app()
    recorder = Recorder(app)
    with TestClient(app) as client:
        record = recorder.record(client.get("/users/1"), description="existing user")

    assert record.source == SourceIdentity(f"{__name__}.UserController", "get")
    assert record.path_params == {"id": "1"}
    assert record.path_info == ("users", "1")
    assert record.request_body is EMPTY
    assert record.response_body == '{"id":1,"name":"Ada"}'
    assert ("host", "testserver") in record.request_headers


def test_mounted_routes_and_bodies() -> None:
    app = _make_app()
    recorder = Recorder(app)
    with TestClient(app) as client:
        record = recorder.record(
            client.post("/api/users/7/posts?draft=1", json={"title": "Hi"}),
            group_title="Posts",
        )

    assert record.path_params == {"user_id": "7"}
    assert record.query_string == "draft=1"
    assert record.status == 201
    assert record.source == SourceIdentity(__name__, "create_post")
    assert json.loads(record.request_body) == {"title": "Hi"}


def test_resolve_route_without_match() -> None:
    app = _make_app()
    with TestClient(app) as client:
        response = client.get("/nowhere")
    assert resolve_route(app, response.request) == ({}, None)


def test_assertion_tuple_uses_test_module_identity() -> None:
    app = _make_app()
    with TestClient(app) as client:
        response = client.get("/users/1")
    record = from_assertion(
        (response, {"module": "tests.UserControllerTest", "description": "show user"}),
        app=app,
    )
    assert record.source == SourceIdentity("tests.UserControllerTest", "get")
    assert record.action_description == "show user"
    assert record.description == "show user"


def test_recorded_traffic_renders_blueprint() -> None:
    app = _make_app()
    recorder = Recorder(app)
    with TestClient(app) as client:
        recorder.record(client.get("/users/1"), description="existing user")
        recorder.record(client.get("/users/2"), description="unknown user")
        recorder.record(client.delete("/users/1"), description="remove user")

    buffer = io.StringIO()
    render_document(recorder.records, buffer, title="Users API")
    document = buffer.getvalue()

    assert document.count("# Group UserController") == 1
    assert "## UserController [/users/{id}]" in document
    assert "### get [GET /users/{id}]" in document
    assert "### delete [DELETE /users/{id}]" in document
    assert document.index("+ Request existing user") < document.index("+ Request unknown user")
    assert document.index("+ Response 200") < document.index("+ Response 404")
    assert '"name": "Ada"' in document
