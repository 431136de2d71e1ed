"""
In-memory helpers for exercising an app without a server.

    app = create_app(boot, routes)

    out = await run_app(app, POST("/hello/world", {"greeting": "Hi"}))
    assert out.status == 200
    assert out.json() == {"message": "Hi, world"}
"""

import json
from typing import Any, Dict, Optional

from .app import App
from .http.request import HeaderValue
from .http.response import Headers


class RecordingWriter:
    """
    A ResponseWriter that records what it is sent.

    Only string chunks are supported; anything else raises TypeError.
    """

    def __init__(self):
        self.status: Optional[int] = None
        self.headers: Optional[Headers] = None
        self.body: Optional[str] = None
        self.ended = False

    def write_head(self, status: int, headers: Headers) -> None:
        self.status = status
        self.headers = dict(headers)

    def write(self, chunk: Any) -> None:
        if not isinstance(chunk, str):
            raise TypeError(
                f"RecordingWriter only supports str chunks, got {type(chunk).__name__}"
            )
        self.body = (self.body or "") + chunk

    def end(self) -> None:
        self.ended = True

    def json(self) -> Any:
        """Parse the recorded body as JSON."""
        if self.body is None:
            raise ValueError("no body was written")
        return json.loads(self.body)


def make_request(
    method: str,
    url: str,
    body: str = "",
    headers: Optional[Dict[str, HeaderValue]] = None,
) -> Dict[str, Any]:
    return {
        "method": method,
        "url": url,
        "body": body,
        "headers": headers or {},
    }


def GET(url: str, headers: Optional[Dict[str, HeaderValue]] = None) -> Dict[str, Any]:
    return make_request("GET", url, "", headers)


def POST(
    url: str,
    body: Any = "",
    headers: Optional[Dict[str, HeaderValue]] = None,
) -> Dict[str, Any]:
    """A POST request; non-str bodies are sent as JSON."""
    if not isinstance(body, str):
        body = json.dumps(body)
    return make_request("POST", url, body, headers)


async def run_app(app: App, request: Any) -> RecordingWriter:
    """Run one request through app and return what it wrote."""
    out = RecordingWriter()
    await app(request, out)
    return out
