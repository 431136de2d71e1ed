"""
=============================================================================
APPLICATION ENTRY POINT
=============================================================================

create_app() turns two user functions into one async request handler:

    boot(builder)   -> builder      shared, per-request setup
                                    (inject config, a db handle, ...)
    routes(builder) -> router       usually a Router over a route table

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      REQUEST LIFECYCLE                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   host request ──► Request.from_raw()                                │
    │                          │                                           │
    │                          ▼                                           │
    │                 Context(request, base_headers)                       │
    │                          │                                           │
    │                          ▼                                           │
    │                 boot(context(base))        may be async              │
    │                          │                                           │
    │                          ▼                                           │
    │                 routes(builder)(method, url)                         │
    │                          │                                           │
    │            ┌─────────────┴─────────────┐                            │
    │            ▼                           ▼                            │
    │        Response                   exception                         │
    │            │                           │  logger.exception          │
    │            │                           ▼                            │
    │            │                   500 Internal Server Error            │
    │            └─────────────┬─────────────┘                            │
    │                          ▼                                           │
    │                 send_response(response, writer)                     │
    │                          │                                           │
    │                          ▼                                           │
    │                 reqflow.access record                                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

This is the ONLY place exceptions are caught. Everything inside the
pipeline reports expected failures as values; whatever still raises
(a malformed host request, a bug in a handler, an unserializable JSON
body) becomes a 500 here and the error is logged with its traceback.

Errors raised while the response itself is being written are not caught:
the head has already gone out, so there is no second response to send.

=============================================================================
"""

import logging
import time
import uuid
from typing import Any, Awaitable, Callable, Mapping, Optional

from .access_log import RequestLog, log_request, now_timestamp
from .config import AppConfig
from .future_result import MaybeAwaitable, resolve
from .http.request import Request, client_ip
from .http.response import SERVER_ERROR, Response, ResponseWriter, send_response
from .http.router import RouterFunction
from .pipeline import Context, ContextBuilder, context


logger = logging.getLogger(__name__)


BootFunction = Callable[[ContextBuilder], MaybeAwaitable[ContextBuilder]]

RoutesFunction = Callable[[ContextBuilder], RouterFunction]

App = Callable[[Any, ResponseWriter], Awaitable[None]]


def _raw_field(raw: Any, name: str) -> str:
    if isinstance(raw, Mapping):
        value = raw.get(name)
    else:
        value = getattr(raw, name, None)
    return value or "-"


def create_app(
    boot: BootFunction,
    routes: RoutesFunction,
    config: Optional[AppConfig] = None,
) -> App:
    """
    Build the application handler.

    Args:
        boot: Extends the base builder; sync or async
        routes: Returns a (method, url) -> Response router for a builder
        config: Application configuration (defaults to AppConfig())

    Returns:
        An async function (raw_request, writer) that handles one request

    Raises:
        ValueError: If config is invalid

    Example:
        app = create_app(
            boot=lambda ctx: ctx.use(inject_props({"db": db})),
            routes=lambda ctx: Router({
                "/users/{id}": lambda args: resource(
                    get=lambda: ctx.handle(lambda c: OK.json(c.db.get(args["id"]))),
                ),
            }),
        )

        await app({"method": "GET", "url": "/users/1"}, writer)
    """
    config = config or AppConfig()
    config.validate()

    async def app(raw: Any, writer: ResponseWriter) -> None:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        timestamp = now_timestamp()
        remote_ip = "<unknown>"

        try:
            request = Request.from_raw(raw)
            remote_ip = client_ip(request)

            base = Context(request, config.base_headers)
            builder = await resolve(boot(context(base)))
            response: Response = await routes(builder)(request.method, request.url)
        except Exception as e:
            logger.exception(f"[{request_id}] Unhandled error: {e}")
            response = SERVER_ERROR

        await send_response(response, writer)

        if config.access_log:
            log_request(
                RequestLog(
                    request_id=request_id,
                    method=_raw_field(raw, "method"),
                    url=_raw_field(raw, "url"),
                    client_ip=remote_ip,
                    status=response.status,
                    duration_ms=(time.time() - start_time) * 1000,
                    timestamp=timestamp,
                ),
                config.log_format,
            )

    return app
