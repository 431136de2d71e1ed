"""
=============================================================================
INBOUND REQUEST
=============================================================================

The request as handed over by the host I/O layer. This framework never
parses bytes off a socket: the host gives us method, url, headers and a
body source, and we treat them as immutable.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       REQUEST FIELDS                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   method    "GET", "POST", ...  (router lower-cases it)             │
    │   url       "/hello/world?x=1"  path + query, untouched             │
    │   headers   {"content-type": "application/json", ...}               │
    │   body      str | bytes | (async) iterable of bytes/str chunks      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
READING THE BODY
=============================================================================

A streamed body is a pull-based, finite, NON-RESTARTABLE sequence. Read it
once with read_body() and keep the string. Bytes chunks go through an
incremental decoder so a multi-byte character split across two chunks is
decoded correctly:

    chunk 1: b"caf\\xc3"   ──►  "caf"     (decoder holds \\xc3)
    chunk 2: b"\\xa9!"      ──►  "é!"

An error raised by the chunk source itself is a STREAM failure and is
reported as BodyStreamError, separate from decoding or validation
failures.

=============================================================================
"""

import codecs
from dataclasses import dataclass, field
from typing import Any, AsyncIterable, Iterable, List, Mapping, Optional, Union


# Header values are a single string or, for repeatable headers such as
# Set-Cookie, a list of strings.
HeaderValue = Union[str, List[str]]

Body = Union[str, bytes, Iterable[Any], AsyncIterable[Any]]


class BodyStreamError(Exception):
    """
    Raised when the body chunk source fails mid-sequence.

    Attributes:
        bytes_read: Number of body bytes (or characters, for str chunks)
                    received before the failure
    """

    def __init__(self, message: str, bytes_read: int = 0):
        super().__init__(message)
        self.bytes_read = bytes_read


@dataclass(frozen=True)
class Request:
    """
    An inbound request.

    Use Request.from_raw() to adapt a host request object; it rejects
    requests without a url or method.
    """

    method: str
    url: str
    headers: Mapping[str, HeaderValue] = field(default_factory=dict)
    body: Body = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "Request":
        """
        Adapt a host request (a mapping or an object with attributes).

        Raises:
            ValueError: If url or method is missing. This surfaces at the
                        application's outer boundary as a 500.
        """
        def get(name: str, default: Any = None) -> Any:
            if isinstance(raw, Mapping):
                return raw.get(name, default)
            return getattr(raw, name, default)

        url = get("url")
        if not url:
            raise ValueError("no url")
        method = get("method")
        if not method:
            raise ValueError("no method")

        return cls(
            method=method,
            url=url,
            headers=get("headers") or {},
            body=get("body", ""),
        )


async def read_body(body: Body, encoding: str = "utf-8") -> str:
    """
    Read a whole request body into a string.

    Args:
        body: A complete str/bytes body or a chunk sequence
        encoding: Codec for bytes chunks

    Returns:
        The decoded body text

    Raises:
        BodyStreamError: If iterating the chunk source raises
        UnicodeDecodeError: If the bytes are not valid in `encoding`
    """
    if isinstance(body, str):
        return body
    if isinstance(body, (bytes, bytearray)):
        return bytes(body).decode(encoding)

    decoder = codecs.getincrementaldecoder(encoding)()
    parts = []
    received = 0

    def consume(chunk: Any) -> None:
        nonlocal received
        if isinstance(chunk, str):
            parts.append(chunk)
            received += len(chunk)
        elif isinstance(chunk, (bytes, bytearray)):
            parts.append(decoder.decode(bytes(chunk)))
            received += len(chunk)
        # Anything else is not body data and is skipped.

    try:
        if hasattr(body, "__aiter__"):
            async for chunk in body:
                consume(chunk)
        else:
            for chunk in body:
                consume(chunk)
    except UnicodeDecodeError:
        raise
    except Exception as e:
        raise BodyStreamError(f"{type(e).__name__}: {e}", bytes_read=received) from e

    parts.append(decoder.decode(b"", final=True))
    return "".join(parts)


def client_ip(request: Request, remote_address: Optional[str] = None) -> str:
    """
    Best-effort client address.

    Uses the first entry of X-Forwarded-For when the request came through
    a proxy, otherwise the socket's remote address.
    """
    forwarded = None
    for name, value in request.headers.items():
        if name.lower() == "x-forwarded-for":
            forwarded = value
            break

    if isinstance(forwarded, str):
        return forwarded.split(",")[0].strip()
    return remote_address or "<unknown>"
