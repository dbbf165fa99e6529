"""Index Route — unauthenticated route listing for diagnostics.

Invariants:
    - Answers every standard HTTP method on "/" with 200
    - Lists only API routes (method + path), never configuration

Design Decisions:
    - The listing is built from the routers themselves at startup, not from
      app.routes: newer FastAPI keeps included routers as nested wrappers
"""

from typing import Iterable

from fastapi import APIRouter, Request
from fastapi.routing import APIRoute

router = APIRouter(tags=["diagnostics"])

INDEX_METHODS = [
    "GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT",
]


def describe_routes(routers: Iterable[APIRouter]) -> list[dict[str, str]]:
    """One {"method", "path"} entry per method of every API route, paths prefixed."""
    return [
        {"method": method, "path": route.path}
        for r in routers
        for route in r.routes
        if isinstance(route, APIRoute)
        for method in sorted(route.methods)
    ]


@router.api_route("/", methods=INDEX_METHODS)
async def list_routes(request: Request):
    return request.app.state.route_listing
