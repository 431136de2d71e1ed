"""
=============================================================================
CONTEXT BUILDER / MIDDLEWARE PIPELINE
=============================================================================

A request is handled by threading a per-request Context through a chain of
middleware and finally into a handler:

    context(base).use(auth).use(validate_body("body", Payload)).handle(save)

Each middleware looks at the current Context and either

    - SUCCEEDS with new properties (and optionally headers) to merge in, or
    - FAILS with a terminal Response, which ends the pipeline.

=============================================================================
PIPELINE ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                  "PIPELINE SO FAR" = FutureResult                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   base ──► use(mw1) ──► use(mw2) ──► use(mw3) ──► handle(h)         │
    │             │             │             │            │               │
    │             ▼             ▼             ▼            ▼               │
    │          Success       Failure ───────────────────► Response         │
    │          ctx + props   (404 + own headers,                           │
    │          + headers      accumulated headers                          │
    │                         as defaults)                                 │
    │                                                                      │
    │   mw3 and h are NEVER invoked once mw2 has failed.                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Nothing runs until handle() is awaited. The builder only composes
FutureResults; short-circuiting falls out of FutureResult.chain refusing to
call its continuation after a failure.

=============================================================================
MERGE RULES
=============================================================================

    PROPERTIES (on success)   the OLD value wins on a name collision
                              (first registered wins)

    HEADERS (on success)      the NEW value wins: old headers overlaid by
                              the middleware's headers

    HEADERS (on failure)      the failure Response's own headers win; the
                              headers accumulated so far only fill gaps

    HEADERS (handler)         the handler's own headers win; accumulated
                              headers only fill gaps

Properties and headers therefore resolve collisions in opposite directions.

=============================================================================
"""

from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from .future_result import FutureResult, MaybeAwaitable, resolve
from .http.request import BodyStreamError, Request, read_body
from .http.response import BAD_REQUEST, Headers, HeaderValue, Response
from .result import Failure, Result, Success


logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# CONTEXT
# =============================================================================

class Context:
    """
    Immutable per-request state.

    Base fields:
        request:  the inbound Request
        headers:  response headers accumulated by middleware

    Everything else is an open property bag filled in by middleware and
    readable as attributes or items:

        ctx.user        ctx["user"]        ctx.get("user")

    A property whose name matches a Context method (get, props, extend)
    is stored as usual but readable only as an item: ctx["get"].

    A Context is never modified; extend() returns its successor.
    """

    __slots__ = ("request", "headers", "_props")

    # Base fields cannot be shadowed by a property.
    RESERVED = frozenset({"request", "headers"})

    def __init__(
        self,
        request: Request,
        headers: Optional[Mapping[str, HeaderValue]] = None,
        props: Optional[Mapping[str, Any]] = None,
    ):
        object.__setattr__(self, "request", request)
        object.__setattr__(self, "headers", dict(headers or {}))
        object.__setattr__(self, "_props", {
            key: value for key, value in (props or {}).items()
            if key not in self.RESERVED
        })

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Context is immutable; use extend()")

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal attribute lookup fails.
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._props[name]
        except KeyError:
            raise AttributeError(f"Context has no property {name!r}") from None

    def __getitem__(self, key: str) -> Any:
        return self._props[key]

    def __contains__(self, key: object) -> bool:
        return key in self._props

    def get(self, key: str, default: Any = None) -> Any:
        return self._props.get(key, default)

    @property
    def props(self) -> Mapping[str, Any]:
        """Read-only view of the property bag."""
        return MappingProxyType(self._props)

    def extend(
        self,
        props: Mapping[str, Any],
        headers: Optional[Mapping[str, HeaderValue]] = None,
    ) -> "Context":
        """
        Build the successor context.

        Args:
            props: New properties; existing properties win on collision
            headers: Headers to merge; these win on collision

        Returns:
            A new Context. self is unchanged.
        """
        merged = {**props, **self._props}
        return Context(self.request, {**self.headers, **(headers or {})}, merged)

    def __repr__(self) -> str:
        return (
            f"Context(request={self.request.method} {self.request.url}, "
            f"headers={self.headers!r}, props={sorted(self._props)!r})"
        )


# =============================================================================
# MIDDLEWARE TYPES
# =============================================================================

@dataclass(frozen=True)
class PropsWithHeaders:
    """What a successful middleware contributes to the next Context."""
    props: Mapping[str, Any] = field(default_factory=dict)
    headers: Optional[Headers] = None


# Success: properties/headers to merge. Failure: terminal Response.
MiddlewareResult = Result[Response, PropsWithHeaders]

# A middleware may be a plain function or a coroutine function.
Middleware = Callable[[Context], MaybeAwaitable[MiddlewareResult]]

RequestHandler = Callable[[Context], MaybeAwaitable[Response]]


def _name_of(middleware: Middleware) -> str:
    return getattr(middleware, "__name__", type(middleware).__name__)


# =============================================================================
# BUILDER
# =============================================================================

class ContextBuilder:
    """
    The pipeline so far.

    Immutable: use() returns a new builder, so a boot-time builder can be
    shared by every route and extended differently by each.

    Usage:
        builder = context(Context(request, {"Connection": "keep-alive"}))

        response = await (builder
            .use(inject_header("x-request-id", "abc"))
            .use(validate_body("body", Payload))
            .handle(lambda ctx: OK.json(ctx.body.model_dump())))
    """

    __slots__ = ("_value",)

    def __init__(self, value: FutureResult[Response, Context]):
        self._value = value

    def use(self, middleware: Middleware) -> "ContextBuilder":
        """
        Append a middleware step.

        If an earlier step failed, middleware is never invoked and the
        failure passes through untouched.
        """
        def step(ctx: Context) -> FutureResult[Response, Context]:
            def on_success(added: PropsWithHeaders) -> Context:
                return ctx.extend(added.props, added.headers)

            def on_failure(response: Response) -> Response:
                logger.debug(
                    f"{_name_of(middleware)} short-circuited "
                    f"{ctx.request.method} {ctx.request.url} with {response.status}"
                )
                return response.default_headers(ctx.headers)

            return (FutureResult.from_callable(middleware, ctx)
                .map(on_success)
                .map_failure(on_failure))

        return ContextBuilder(self._value.chain(step))

    async def handle(self, handler: RequestHandler) -> Response:
        """
        Run the pipeline and the terminal handler.

        Returns:
            The failure Response if any step failed, otherwise the
            handler's Response with accumulated headers as defaults.
        """
        def step(ctx: Context) -> FutureResult[Response, Response]:
            async def effect() -> Result[Response, Response]:
                return Success(await resolve(handler(ctx)))

            return FutureResult.of(effect).map(
                lambda response: response.default_headers(ctx.headers)
            )

        return await self._value.chain(step).fold(_identity, _identity)


def _identity(value: T) -> T:
    return value


def context(base: Context) -> ContextBuilder:
    """Start a pipeline whose first step succeeds with base."""
    return ContextBuilder(FutureResult.succeed(base))


# =============================================================================
# MIDDLEWARE RESULTS
# =============================================================================
#
# Building blocks for writing middleware bodies:
#
#     def auth(ctx):
#         user = lookup(ctx.request.headers.get("authorization"))
#         if user is None:
#             return Failure(UNAUTHORIZED)
#         return set_prop("user", user)
#
# =============================================================================

def set_props(props: Mapping[str, Any]) -> MiddlewareResult:
    return Success(PropsWithHeaders(props=dict(props)))


def set_prop(key: str, value: Any) -> MiddlewareResult:
    return set_props({key: value})


def set_headers(headers: Mapping[str, HeaderValue]) -> MiddlewareResult:
    return Success(PropsWithHeaders(props={}, headers=dict(headers)))


def set_header(key: str, value: HeaderValue) -> MiddlewareResult:
    return set_headers({key: value})


# =============================================================================
# READY-MADE MIDDLEWARE
# =============================================================================

def inject_props(props: Mapping[str, Any]) -> Middleware:
    """Middleware that always adds the given properties."""
    def inject_props_middleware(ctx: Context) -> MiddlewareResult:
        return set_props(props)
    return inject_props_middleware


def inject_header(key: str, value: HeaderValue) -> Middleware:
    """Middleware that always adds one response header."""
    def inject_header_middleware(ctx: Context) -> MiddlewareResult:
        return set_header(key, value)
    return inject_header_middleware


def inject_headers(headers: Mapping[str, HeaderValue]) -> Middleware:
    def inject_headers_middleware(ctx: Context) -> MiddlewareResult:
        return set_headers(headers)
    return inject_headers_middleware


def inject(
    key: str,
    error_response: Response,
    factory: Callable[[Context], MaybeAwaitable[Result[Any, Any]]],
) -> Middleware:
    """
    Compute a property from the context.

    Args:
        key: Property name to store the value under
        error_response: Response to fail with; the factory's error is
                        sent as JSON {"error": <error>}
        factory: Sync or async function returning a Result

    Returns:
        Middleware storing the factory's success value under key
    """
    async def inject_middleware(ctx: Context) -> MiddlewareResult:
        result = await resolve(factory(ctx))
        return (result
            .map_failure(lambda error: error_response.json({"error": error}))
            .chain(lambda value: set_prop(key, value)))

    inject_middleware.__name__ = f"inject[{key}]"
    return inject_middleware


def validate(
    key: str,
    factory: Callable[[Context], MaybeAwaitable[Result[Any, Any]]],
) -> Middleware:
    """inject() failing with 400 Bad Request."""
    return inject(key, BAD_REQUEST, factory)


# =============================================================================
# BODY DECODING
# =============================================================================
#
# The schema language is pydantic's: any type a TypeAdapter accepts
# (BaseModel subclasses, TypedDicts, dataclasses, list[int], ...).
# Validation is strict, so "42" is not accepted where a number is expected.
#
# =============================================================================

def describe_validation_error(error: ValidationError) -> str:
    """One line per error: dotted location, colon, message."""
    lines = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "<root>"
        lines.append(f"{location}: {detail['msg']}")
    return "\n".join(lines)


def decode_body(
    shape: Any,
    encoding: str = "utf-8",
) -> Callable[[Context], Any]:
    """
    Build an async factory decoding the request body as JSON of `shape`.

    The returned coroutine function yields Success(decoded value) or
    Failure(description) for a body stream failure, undecodable bytes,
    malformed JSON or a schema mismatch.
    """
    adapter = TypeAdapter(shape)

    async def decode(ctx: Context) -> Result[str, Any]:
        try:
            text = await read_body(ctx.request.body, encoding)
        except BodyStreamError as e:
            return Failure(f"body stream failed: {e}")
        except UnicodeDecodeError as e:
            return Failure(str(e))

        try:
            return Success(adapter.validate_json(text, strict=True))
        except ValidationError as e:
            return Failure(describe_validation_error(e))

    return decode


def validate_body(key: str, shape: Any, encoding: str = "utf-8") -> Middleware:
    """
    Middleware decoding the JSON body into property `key`.

    Fails with 400 and {"error": "<description>"} when the body does not
    match `shape`.
    """
    return validate(key, decode_body(shape, encoding))
