"""
=============================================================================
EXAMPLE: HELLO APP
=============================================================================

A complete reqflow application:

    GET  /foo             {"foo": "lorem ipsum"}    property injected at boot
    GET  /hello/{name}    {"name": "<name>"}
    POST /hello/{name}    {"greeting": "Hi"}  →  {"message": "Hi, <name>"}
                          (400 with a description if the body is invalid)

reqflow does no socket I/O itself. This file plugs the app into the
standard library's http.server as the host I/O layer, one request per
thread, one event loop per request.

USAGE:
    python examples/hello_app.py            # serve on 127.0.0.1:8888
    python examples/hello_app.py --demo     # run sample requests in memory

    curl http://127.0.0.1:8888/foo
    curl -X POST http://127.0.0.1:8888/hello/world -d '{"greeting": "Hi"}'

=============================================================================
"""

import argparse
import asyncio
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import logging
import os
import sys

from pydantic import BaseModel

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from reqflow import (  # noqa: E402
    OK,
    AppConfig,
    ContextBuilder,
    Router,
    create_app,
    inject_props,
    resource,
    setup_logging,
    validate_body,
)
from reqflow.testing import GET, POST, run_app  # noqa: E402


logger = logging.getLogger(__name__)


class Greeting(BaseModel):
    greeting: str


# =============================================================================
# APPLICATION
# =============================================================================

def boot(ctx: ContextBuilder) -> ContextBuilder:
    return ctx.use(inject_props({"customBaseContextProp": "lorem ipsum"}))


def routes(ctx: ContextBuilder) -> Router:
    def hello(args):
        name = args["name"]
        return resource(
            get=lambda: ctx.handle(lambda c: OK.json({"name": name})),
            post=lambda: ctx.use(validate_body("message", Greeting)).handle(
                lambda c: OK.json({"message": f"{c.message.greeting}, {name}"})
            ),
        )

    async def foo(args):
        return resource(
            get=lambda: ctx.handle(
                lambda c: OK.json({"foo": c.customBaseContextProp})
            ),
        )

    return Router({
        "/foo": foo,
        "/hello/{name}": hello,
    })


# =============================================================================
# HOST I/O LAYER
# =============================================================================

class HandlerWriter:
    """ResponseWriter over a BaseHTTPRequestHandler."""

    def __init__(self, handler: BaseHTTPRequestHandler):
        self.handler = handler

    def write_head(self, status, headers):
        self.handler.send_response(status)
        for name, value in headers.items():
            for item in (value if isinstance(value, list) else [value]):
                self.handler.send_header(name, item)
        self.handler.end_headers()

    def write(self, chunk):
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        self.handler.wfile.write(chunk)

    def end(self):
        self.handler.wfile.flush()


def make_handler(app):
    class RequestHandler(BaseHTTPRequestHandler):
        protocol_version = "HTTP/1.0"

        def _dispatch(self):
            length = int(self.headers.get("Content-Length") or 0)
            raw = {
                "method": self.command,
                "url": self.path,
                "headers": {k.lower(): v for k, v in self.headers.items()},
                "body": self.rfile.read(length) if length else b"",
            }
            asyncio.run(app(raw, HandlerWriter(self)))

        do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = _dispatch

        def log_message(self, format, *args):
            # reqflow.access already logs each request
            pass

    return RequestHandler


# =============================================================================
# MAIN
# =============================================================================

async def demo(app) -> None:
    for request in (
        GET("/foo"),
        GET("/hello/world"),
        POST("/hello/world", {"greeting": "Hi"}),
        POST("/hello/world", {"greeting": 42}),
        GET("/nope"),
        POST("/foo"),
    ):
        out = await run_app(app, request)
        print(f"{request['method']:4} {request['url']:14} → {out.status} {out.body}")


def main():
    parser = argparse.ArgumentParser(description="reqflow hello app")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8888)
    parser.add_argument("--demo", action="store_true", help="run sample requests and exit")
    args = parser.parse_args()

    config = AppConfig.from_env()
    setup_logging(config)
    app = create_app(boot, routes, config)

    if args.demo:
        asyncio.run(demo(app))
        return

    server = ThreadingHTTPServer((args.host, args.port), make_handler(app))
    logger.info(f"listening on http://{args.host}:{args.port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down server...")
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
