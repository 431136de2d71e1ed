"""
=============================================================================
URL ROUTER
=============================================================================

Dispatches a (method, url) pair to a handler using an ordered route table:

    pattern string  ──►  factory(args)  ──►  Resource  ──►  verb handler

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTING FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Incoming: GET /hello/world                                         │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  ROUTE TABLE (declaration order)                             │   │
    │   │                                                              │   │
    │   │   "/foo"           → factory                                 │   │
    │   │   "/hello/{name}"  → factory        ← FIRST STRUCTURAL MATCH │   │
    │   │   "/{anything}/x"  → factory        (never consulted)        │   │
    │   │                                                              │   │
    │   │   Captured: {"name": "world"}                                │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   factory({"name": "world"})                                         │
    │        │                                                             │
    │        ├── None                      → 404 Not Found                 │
    │        ├── Resource without "get"    → 405 Method Not Allowed        │
    │        └── Resource.methods["get"]() → response                      │
    │                  + default Content-Type from the Resource            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The first pattern that matches STRUCTURALLY (segment count and literals)
decides the outcome, even when its factory returns None. Later patterns are
not tried.

=============================================================================
ROUTE PATTERNS
=============================================================================

    "/hello/{name}"  splits on "/" into

        ""        literal   (leading slash yields an empty first segment)
        "hello"   literal
        "{name}"  variable "name"

    Matching "/hello/world":
        ""      == ""        ✓
        "hello" == "hello"   ✓
        "world" → name        captured

    "/hello/world/extra" has 4 segments vs 3 → no match.
    "/foobar" vs "/foo": literal mismatch → no match.

Patterns are compiled ONCE, when the Router is built. Captured variables
are exposed as a plain str → str dict.

=============================================================================
"""

from dataclasses import dataclass, field
import logging
from typing import Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..future_result import MaybeAwaitable, resolve
from .response import NOT_ALLOWED, NOT_FOUND, Response


logger = logging.getLogger(__name__)


DEFAULT_CONTENT_TYPE = "application/json"


# =============================================================================
# TYPE ALIASES
# =============================================================================

# A verb handler takes no arguments; everything it needs was captured when
# the factory built the Resource.
Handler = Callable[[], MaybeAwaitable[Response]]

RouteArgs = Dict[str, str]


@dataclass(frozen=True)
class Resource:
    """
    Everything one path offers: a default content type plus verb handlers.

    Method names are lower-case ("get", "post", ...).
    """

    content_type: str = DEFAULT_CONTENT_TYPE
    methods: Mapping[str, Handler] = field(default_factory=dict)


RouteFactory = Callable[[RouteArgs], MaybeAwaitable[Optional[Resource]]]

# Route tables are plain dicts; insertion order is dispatch order.
RouteTable = Mapping[str, RouteFactory]

RouterFunction = Callable[[str, str], Awaitable[Response]]


def resource(content_type: str = DEFAULT_CONTENT_TYPE, **methods: Handler) -> Resource:
    """
    Build a Resource from keyword handlers.

    Usage:
        resource(
            get=lambda: ctx.handle(show_user),
            post=lambda: ctx.use(validate_body("user", User)).handle(save_user),
        )
    """
    return Resource(
        content_type=content_type,
        methods={name.lower(): handler for name, handler in methods.items()},
    )


# =============================================================================
# SEGMENTS
# =============================================================================

@dataclass(frozen=True)
class LiteralSegment:
    """A path segment that must match exactly."""
    value: str


@dataclass(frozen=True)
class VarSegment:
    """A {name} path segment; matches any value and captures it."""
    name: str


RouteSegment = Union[LiteralSegment, VarSegment]


def read_route_segment(segment: str) -> RouteSegment:
    if segment.startswith("{") and segment.endswith("}"):
        return VarSegment(segment[1:-1])
    return LiteralSegment(segment)


def compile_pattern(pattern: str) -> List[RouteSegment]:
    """
    Split a route pattern into literal and variable segments.

    Example:
        >>> compile_pattern("/users/{id}")
        [LiteralSegment(value=''), LiteralSegment(value='users'), VarSegment(name='id')]
    """
    return [read_route_segment(segment) for segment in pattern.split("/")]


def match_path(
    path: str,
    pattern: Union[str, Sequence[RouteSegment]],
) -> Optional[RouteArgs]:
    """
    Match a request path against a route pattern.

    Args:
        path: Request path, split on "/" as-is
        pattern: Pattern string or a compiled segment list

    Returns:
        Captured variables (possibly empty) on a match, None otherwise.
        When a variable name repeats, the later segment's value wins.
    """
    route = compile_pattern(pattern) if isinstance(pattern, str) else pattern
    parts = path.split("/")

    if len(parts) != len(route):
        return None

    args: RouteArgs = {}
    for part, segment in zip(parts, route):
        if isinstance(segment, LiteralSegment):
            if part != segment.value:
                return None
        else:
            args[segment.name] = part

    return args


# =============================================================================
# ROUTER
# =============================================================================

class Router:
    """
    Ordered route table dispatcher.

    Usage:
        router = Router({
            "/foo": lambda args: resource(get=lambda: OK),
            "/hello/{name}": lambda args: resource(
                get=lambda: OK.json({"name": args["name"]}),
            ),
        })

        response = await router("GET", "/hello/world")

    A route table is read-only once the router is built.
    """

    def __init__(self, table: RouteTable):
        # dict preserves insertion order, which is dispatch order
        self._routes: List[Tuple[str, List[RouteSegment], RouteFactory]] = [
            (pattern, compile_pattern(pattern), factory)
            for pattern, factory in table.items()
        ]

    @property
    def patterns(self) -> List[str]:
        return [pattern for pattern, _, _ in self._routes]

    def match(self, url: str) -> Optional[Tuple[str, RouteArgs]]:
        """
        Find the first pattern that structurally matches url.

        Returns:
            (pattern, captured args) or None
        """
        for pattern, segments, _ in self._routes:
            args = match_path(url, segments)
            if args is not None:
                return pattern, args
        return None

    async def __call__(self, method: str, url: str) -> Response:
        """
        Route a request.

        Returns:
            The handler's response with the Resource's Content-Type as a
            default, or NOT_FOUND / NOT_ALLOWED.
        """
        method = method.lower()

        for pattern, segments, factory in self._routes:
            args = match_path(url, segments)
            if args is None:
                continue

            found = await resolve(factory(args))
            if found is None:
                logger.debug(f"{pattern} matched {url} but resolved to nothing")
                return NOT_FOUND

            handler = found.methods.get(method)
            if handler is None:
                logger.debug(f"{method.upper()} not allowed on {pattern}")
                return NOT_ALLOWED

            response = await resolve(handler())
            return response.default_header("Content-Type", found.content_type)

        logger.debug(f"No route matches {url}")
        return NOT_FOUND
