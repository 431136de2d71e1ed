"""
=============================================================================
HTTP VALUES AND ROUTING
=============================================================================

The HTTP-facing half of reqflow. Nothing here touches a socket: the host
I/O layer hands over a Request and receives a Response through a
ResponseWriter.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST (request.py)                                                │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Immutable inbound request and a one-shot body reader                │
    │                                                                      │
    │   • Request.from_raw() adapts a host mapping or object              │
    │   • read_body() handles str, bytes and (async) chunk streams        │
    │   • client_ip() from X-Forwarded-For                                │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE (response.py)                                              │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Immutable Response value                                            │
    │                                                                      │
    │   • header / default_header / merge_headers / default_headers       │
    │   • canned responses: OK, NOT_FOUND, NOT_ALLOWED, ...               │
    │   • send_response() drives a ResponseWriter                         │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ ROUTER (router.py)                                                  │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Ordered pattern table → Resource → verb handler                     │
    │                                                                      │
    │   • "/hello/{name}" captures {"name": "..."}                        │
    │   • first structural match decides; 404 / 405 otherwise             │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import BodyStreamError, Request, client_ip, read_body
from .response import (
    Response,
    ResponseWriter,
    send_response,
    OK,                 # 200 OK
    CREATED,            # 201 Created
    ACCEPTED,           # 202 Accepted
    NO_CONTENT,         # 204 No Content
    BAD_REQUEST,        # 400 Bad Request
    UNAUTHORIZED,       # 401 Unauthorized
    FORBIDDEN,          # 403 Forbidden
    NOT_FOUND,          # 404 Not Found
    NOT_ALLOWED,        # 405 Method Not Allowed
    IS_TEAPOT,          # 418 I'm a teapot
    SERVER_ERROR,       # 500 Internal Server Error
    SERVER_UNAVAILABLE, # 503 Service Unavailable
)
from .router import Resource, Router, match_path, resource
from .status_codes import HTTPStatus

__all__ = [
    # Request
    "Request",
    "BodyStreamError",
    "read_body",
    "client_ip",

    # Response
    "Response",
    "ResponseWriter",
    "send_response",
    "OK",
    "CREATED",
    "ACCEPTED",
    "NO_CONTENT",
    "BAD_REQUEST",
    "UNAUTHORIZED",
    "FORBIDDEN",
    "NOT_FOUND",
    "NOT_ALLOWED",
    "IS_TEAPOT",
    "SERVER_ERROR",
    "SERVER_UNAVAILABLE",

    # Routing
    "Router",
    "Resource",
    "resource",
    "match_path",

    # Status codes
    "HTTPStatus",
]
