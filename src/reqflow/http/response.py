"""
=============================================================================
IMMUTABLE HTTP RESPONSE
=============================================================================

A Response is a value: status, message, headers and an optional body.
Every "setter" returns a NEW Response, so a response can be shared freely
between requests (the canned NOT_FOUND below is one object for the whole
process) without one handler's headers leaking into another's.

=============================================================================
TWO HEADER POLICIES
=============================================================================

There are two distinct precedence policies, and the pipeline depends on
using the right one at each step. They are deliberately separate methods.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                  OVERRIDE vs FILL-MISSING                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   current headers:  {"A": "1", "B": "2"}                            │
    │   incoming:         {"B": "x", "C": "3"}                            │
    │                                                                      │
    │   merge_headers   (overlay)   → {"A": "1", "B": "x", "C": "3"}      │
    │   default_headers (underlay)  → {"A": "1", "B": "2", "C": "3"}      │
    │                                                                      │
    │   header(k, v)          single-key overlay  (always overwrites)     │
    │   default_header(k, v)  single-key underlay (only if k is absent)   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    The router uses default_header for Content-Type, so a handler that
    sets its own Content-Type keeps it.

=============================================================================
BODIES
=============================================================================

    None                      no body
    str                       written in one piece
    iterable / async iterable chunks written one by one, consumed ONCE

=============================================================================
"""

from dataclasses import dataclass, field, replace
import json
from typing import Any, AsyncIterable, Dict, Iterable, Mapping, Optional, Protocol, Union

from .request import Body, HeaderValue
from .status_codes import HTTPStatus


Headers = Dict[str, HeaderValue]


@dataclass(frozen=True)
class Response:
    """
    An immutable HTTP response.

    Build from a canned response and refine:

        NOT_FOUND.header("x-reason", "gone").json({"error": "no such user"})
    """

    status: int
    message: str = ""
    headers: Headers = field(default_factory=dict)
    body: Optional[Body] = None

    @classmethod
    def of(cls, status: int, message: str = "") -> "Response":
        return cls(status=status, message=message)

    # =========================================================================
    # BODY
    # =========================================================================

    def json(self, value: Any) -> "Response":
        """
        Replace the body with the compact JSON encoding of value.

        Headers are left alone; Content-Type is defaulted by the router.
        """
        body = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        return replace(self, body=body)

    def text(self, value: str) -> "Response":
        return replace(self, body=value)

    def stream(self, chunks: Union[Iterable[Any], AsyncIterable[Any]]) -> "Response":
        """Use a chunk sequence as the body. It is iterated once, when sent."""
        return replace(self, body=chunks)

    # =========================================================================
    # HEADERS
    # =========================================================================

    def header(self, name: str, value: HeaderValue) -> "Response":
        """Set a header, overwriting any existing value."""
        return replace(self, headers={**self.headers, name: value})

    def default_header(self, name: str, value: HeaderValue) -> "Response":
        """Set a header only if it is not already present."""
        return replace(self, headers={name: value, **self.headers})

    def merge_headers(self, headers: Mapping[str, HeaderValue]) -> "Response":
        """Overlay headers; incoming values win on collision."""
        return replace(self, headers={**self.headers, **headers})

    def default_headers(self, headers: Mapping[str, HeaderValue]) -> "Response":
        """Underlay headers; existing values win on collision."""
        return replace(self, headers={**headers, **self.headers})


# =============================================================================
# CANNED RESPONSES
# =============================================================================
#
# Safe to share: Response is immutable.
#
# =============================================================================

def _canned(status: HTTPStatus) -> Response:
    return Response.of(int(status), status.phrase)


OK = _canned(HTTPStatus.OK)
CREATED = _canned(HTTPStatus.CREATED)
ACCEPTED = _canned(HTTPStatus.ACCEPTED)
NO_CONTENT = _canned(HTTPStatus.NO_CONTENT)

BAD_REQUEST = _canned(HTTPStatus.BAD_REQUEST)
UNAUTHORIZED = _canned(HTTPStatus.UNAUTHORIZED)
FORBIDDEN = _canned(HTTPStatus.FORBIDDEN)
NOT_FOUND = _canned(HTTPStatus.NOT_FOUND)
NOT_ALLOWED = _canned(HTTPStatus.METHOD_NOT_ALLOWED)
IS_TEAPOT = _canned(HTTPStatus.IM_A_TEAPOT)

SERVER_ERROR = _canned(HTTPStatus.INTERNAL_SERVER_ERROR)
SERVER_UNAVAILABLE = _canned(HTTPStatus.SERVICE_UNAVAILABLE)


# =============================================================================
# SERIALIZATION
# =============================================================================

class ResponseWriter(Protocol):
    """
    The host I/O layer's side of a response.

    send_response() calls write_head once, write zero or more times,
    then end.
    """

    def write_head(self, status: int, headers: Headers) -> None: ...

    def write(self, chunk: Any) -> None: ...

    def end(self) -> None: ...


async def send_response(response: Response, writer: ResponseWriter) -> None:
    """
    Drive a ResponseWriter with a Response.

    A str (or bytes) body is written in a single call. Chunk sequences,
    sync or async, are written one chunk per call.

    Args:
        response: The final response of a pipeline
        writer: Host adapter receiving status, headers and body
    """
    writer.write_head(response.status, response.headers)

    body = response.body
    if body:
        if isinstance(body, (str, bytes)):
            writer.write(body)
        elif hasattr(body, "__aiter__"):
            async for chunk in body:
                writer.write(chunk)
        else:
            for chunk in body:
                writer.write(chunk)

    writer.end()
