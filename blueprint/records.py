"""Interaction records and the boundary that builds them from captured traffic."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import httpx
from starlette.routing import Match, Mount

from .utils.errors import MissingIdentity


class _Empty:
    """Marker for a body that was never sent."""

    _instance: Optional["_Empty"] = None

    def __new__(cls) -> "_Empty":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "EMPTY"


EMPTY = _Empty()

Header = Tuple[str, str]


@dataclass(frozen=True)
class SourceIdentity:
    """The test module or endpoint that produced a record."""

    qualified_name: str
    operation: str


@dataclass(frozen=True)
class InteractionRecord:
    method: str
    request_path: str
    status: int
    query_string: str = ""
    path_info: Tuple[str, ...] = ()
    path_params: Mapping[str, str] = field(default_factory=dict)
    request_headers: Tuple[Header, ...] = ()
    request_body: Any = EMPTY
    response_body: Any = EMPTY
    group_title: Optional[str] = None
    action_description: Optional[str] = None
    source: Optional[SourceIdentity] = None
    description: str = ""
    detail: str = ""

    @property
    def full_path(self) -> str:
        if not self.query_string:
            return self.request_path
        return f"{self.request_path}?{self.query_string}"


def _strip_namespace(name: str) -> str:
    return name.rsplit(".", 1)[-1]


def group_key(record: InteractionRecord) -> str:
    """Return the document group a record belongs to."""
    if record.group_title:
        return record.group_title
    if record.source is None:
        raise MissingIdentity(record.method, record.request_path, "group")
    name = _strip_namespace(record.source.qualified_name)
    if name.endswith("Test") and name != "Test":
        name = name[: -len("Test")]
    return name


def action_key(record: InteractionRecord) -> str:
    """Return the action heading a record belongs to."""
    if record.action_description:
        return record.action_description
    if record.source is None:
        raise MissingIdentity(record.method, record.request_path, "action")
    return record.source.operation


# -- capture boundary ---------------------------------------------------------


def _qualified_name(obj: Any) -> str:
    if isinstance(obj, str):
        return obj
    module = getattr(obj, "__module__", None)
    qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", "")
    if module and qualname:
        return f"{module}.{qualname}"
    return qualname or str(obj)


def _match_route(routes: Sequence[Any], scope: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    partial: Optional[Dict[str, Any]] = None
    for route in routes:
        match, child_scope = route.matches(scope)
        if match == Match.NONE:
            continue
        merged = {**scope, **child_scope}
        merged["path_params"] = {
            **scope.get("path_params", {}),
            **child_scope.get("path_params", {}),
        }
        if isinstance(route, Mount) and route.routes:
            nested = _match_route(route.routes, merged)
            if nested is None:
                continue
            merged = nested
        if match == Match.FULL:
            return merged
        if partial is None:
            partial = merged
    return partial


def resolve_route(app: Any, request: httpx.Request) -> Tuple[Dict[str, str], Optional[SourceIdentity]]:
    """Match ``request`` against a Starlette app's routes.

    Returns the matched path parameters (stringified, in route order) and the
    identity of the endpoint that served the request.
    """

    scope = {
        "type": "http",
        "method": request.method,
        "path": request.url.path,
        "root_path": "",
        "path_params": {},
    }
    matched = _match_route(getattr(app, "routes", ()), scope)
    if matched is None:
        return {}, None
    params = {name: str(value) for name, value in matched["path_params"].items()}
    endpoint = matched.get("endpoint")
    if endpoint is None:
        return params, None
    if isinstance(endpoint, type):
        identity = SourceIdentity(_qualified_name(endpoint), request.method.lower())
    else:
        module = getattr(endpoint, "__module__", "") or ""
        identity = SourceIdentity(module, getattr(endpoint, "__name__", str(endpoint)))
    return params, identity


def _request_body(request: httpx.Request) -> Any:
    try:
        content = request.content
    except httpx.RequestNotRead:
        content = request.read()
    if not content:
        return EMPTY
    return content.decode("utf-8")


def _response_body(response: httpx.Response) -> Any:
    if not response.content:
        return EMPTY
    return response.text


def from_exchange(
    response: httpx.Response,
    *,
    app: Any = None,
    group_title: Optional[str] = None,
    action_description: Optional[str] = None,
    description: str = "",
    detail: str = "",
) -> InteractionRecord:
    """Build a record from a live exchange made through a test client."""

    request = response.request
    path = request.url.path
    params: Dict[str, str] = {}
    source: Optional[SourceIdentity] = None
    if app is not None:
        params, source = resolve_route(app, request)
    return InteractionRecord(
        method=request.method,
        request_path=path,
        query_string=request.url.query.decode("ascii"),
        path_info=tuple(segment for segment in path.split("/") if segment),
        path_params=params,
        request_headers=tuple(request.headers.multi_items()),
        request_body=_request_body(request),
        response_body=_response_body(response),
        status=response.status_code,
        group_title=group_title,
        action_description=action_description,
        source=source,
        description=description,
        detail=detail,
    )


def from_assertion(
    assertion: Tuple[httpx.Response, Mapping[str, Any]], *, app: Any = None
) -> InteractionRecord:
    """Build a record from a ``(response, opts)`` pair logged by a test.

    ``opts`` names the test ``module`` and the action ``description``; it may
    also carry ``group_title``, ``detail`` and an ``example`` description.
    """

    response, opts = assertion
    record = from_exchange(
        response,
        app=app,
        group_title=opts.get("group_title"),
        action_description=opts.get("description"),
        description=opts.get("example") or opts.get("description", ""),
        detail=opts.get("detail", ""),
    )
    module = opts.get("module")
    if module is None:
        return record
    operation = record.source.operation if record.source else ""
    return replace(record, source=SourceIdentity(_qualified_name(module), operation))


# -- persistence --------------------------------------------------------------


def _body_to_json(body: Any) -> Any:
    return None if body is EMPTY or body is None else body


def _body_from_json(body: Any) -> Any:
    return EMPTY if body is None else body


def record_to_dict(record: InteractionRecord) -> Dict[str, Any]:
    """Return a JSON-serialisable dict for ``record``."""

    source = None
    if record.source is not None:
        source = {
            "qualified_name": record.source.qualified_name,
            "operation": record.source.operation,
        }
    return {
        "method": record.method,
        "request_path": record.request_path,
        "query_string": record.query_string,
        "path_info": list(record.path_info),
        "path_params": dict(record.path_params),
        "request_headers": [[name, value] for name, value in record.request_headers],
        "request_body": _body_to_json(record.request_body),
        "response_body": _body_to_json(record.response_body),
        "status": record.status,
        "group_title": record.group_title,
        "action_description": record.action_description,
        "source": source,
        "description": record.description,
        "detail": record.detail,
    }


def record_from_dict(data: Mapping[str, Any]) -> InteractionRecord:
    """Inverse of :func:`record_to_dict`; missing optional keys take defaults."""

    source_data = data.get("source")
    source = None
    if source_data:
        source = SourceIdentity(source_data["qualified_name"], source_data["operation"])
    headers: List[Header] = [(str(name), str(value)) for name, value in data.get("request_headers", [])]
    return InteractionRecord(
        method=data["method"],
        request_path=data["request_path"],
        query_string=data.get("query_string", ""),
        path_info=tuple(data.get("path_info", ())),
        path_params={str(k): str(v) for k, v in data.get("path_params", {}).items()},
        request_headers=tuple(headers),
        request_body=_body_from_json(data.get("request_body")),
        response_body=_body_from_json(data.get("response_body")),
        status=int(data["status"]),
        group_title=data.get("group_title"),
        action_description=data.get("action_description"),
        source=source,
        description=data.get("description", ""),
        detail=data.get("detail", ""),
    )


__all__ = [
    "EMPTY",
    "Header",
    "InteractionRecord",
    "SourceIdentity",
    "action_key",
    "from_assertion",
    "from_exchange",
    "group_key",
    "record_from_dict",
    "record_to_dict",
    "resolve_route",
]
