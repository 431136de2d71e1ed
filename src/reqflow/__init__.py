"""
=============================================================================
REQFLOW - Typed Request Pipelines Without Exceptions
=============================================================================

A small functional core for handling HTTP-like requests:

    1. RESULT ALGEBRA
       - Success / Failure values instead of raised exceptions
       - FutureResult: a lazy async computation producing a Result

    2. CONTEXT BUILDER
       - Middleware adds properties and response headers to a context
       - Any middleware can stop the pipeline with a Response

    3. ROUTER
       - "/hello/{name}" patterns, first structural match wins
       - 404 / 405 answered for you

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    reqflow/
    ├── __init__.py          # This file - package exports
    ├── result.py            # Success / Failure
    ├── future_result.py     # FutureResult, resolve()
    ├── pipeline.py          # Context, ContextBuilder, middleware helpers
    ├── app.py               # create_app(): the outer exception boundary
    ├── config.py            # AppConfig dataclass
    ├── access_log.py        # RequestLog, setup_logging()
    ├── testing.py           # In-memory writer and request helpers
    └── http/
        ├── request.py       # Request, read_body(), client_ip()
        ├── response.py      # Response, canned responses, send_response()
        ├── router.py        # Router, resource(), match_path()
        └── status_codes.py  # HTTPStatus

=============================================================================
QUICK START
=============================================================================

    from pydantic import BaseModel

    from reqflow import OK, Router, create_app, inject_props, resource, validate_body

    class Greeting(BaseModel):
        greeting: str

    def boot(ctx):
        return ctx.use(inject_props({"motd": "lorem ipsum"}))

    def routes(ctx):
        return Router({
            "/foo": lambda args: resource(
                get=lambda: ctx.handle(lambda c: OK.json({"foo": c.motd})),
            ),
            "/hello/{name}": lambda args: resource(
                get=lambda: ctx.handle(lambda c: OK.json({"name": args["name"]})),
                post=lambda: ctx.use(validate_body("message", Greeting)).handle(
                    lambda c: OK.json({"message": f"{c.message.greeting}, {args['name']}"})
                ),
            ),
        })

    app = create_app(boot, routes)

    # The host I/O layer calls:
    await app({"method": "GET", "url": "/foo", "headers": {}, "body": ""}, writer)

=============================================================================
"""

__version__ = "1.0.0"

from .access_log import RequestLog, setup_logging
from .app import App, create_app
from .config import AppConfig
from .future_result import FutureResult, resolve
from .http import (
    ACCEPTED,
    BAD_REQUEST,
    CREATED,
    FORBIDDEN,
    IS_TEAPOT,
    NO_CONTENT,
    NOT_ALLOWED,
    NOT_FOUND,
    OK,
    SERVER_ERROR,
    SERVER_UNAVAILABLE,
    UNAUTHORIZED,
    BodyStreamError,
    HTTPStatus,
    Request,
    Resource,
    Response,
    ResponseWriter,
    Router,
    client_ip,
    match_path,
    read_body,
    resource,
    send_response,
)
from .pipeline import (
    Context,
    ContextBuilder,
    PropsWithHeaders,
    context,
    decode_body,
    inject,
    inject_header,
    inject_headers,
    inject_props,
    set_header,
    set_headers,
    set_prop,
    set_props,
    validate,
    validate_body,
)
from .result import Failure, Result, Success, from_nullable

__all__ = [
    # Results
    "Result",
    "Success",
    "Failure",
    "from_nullable",
    "FutureResult",
    "resolve",

    # Pipeline
    "Context",
    "ContextBuilder",
    "PropsWithHeaders",
    "context",
    "set_props",
    "set_prop",
    "set_headers",
    "set_header",
    "inject_props",
    "inject_header",
    "inject_headers",
    "inject",
    "validate",
    "decode_body",
    "validate_body",

    # HTTP
    "Request",
    "BodyStreamError",
    "read_body",
    "client_ip",
    "Response",
    "ResponseWriter",
    "send_response",
    "HTTPStatus",
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
    "Router",
    "Resource",
    "resource",
    "match_path",

    # Application
    "App",
    "create_app",
    "AppConfig",
    "RequestLog",
    "setup_logging",

    "__version__",
]
