"""
=============================================================================
ACCESS LOGGING
=============================================================================

One structured record per request, emitted on the "reqflow.access" logger
so it can be routed separately from diagnostic logs:

    logging.getLogger("reqflow.access").addHandler(file_handler)

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        TWO FORMATS                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   text   10.0.0.7 - - [19/Oct/2026:10:01:02 +0000]                  │
    │          "GET /hello/world" 200 4.21ms a1b2c3d4                     │
    │                                                                      │
    │   json   {"request_id": "a1b2c3d4", "method": "GET", ...}           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass
import json
import logging
import time

from .config import AppConfig


logger = logging.getLogger("reqflow.access")


@dataclass
class RequestLog:
    """
    Structured log entry for a request.

    Fields:
        request_id:  Short random ID, also used to correlate error logs
        method:      Request method as received ("-" if missing)
        url:         Request url as received ("-" if missing)
        client_ip:   First X-Forwarded-For entry or "<unknown>"
        status:      Response status
        duration_ms: Time from receipt to the last body chunk written
        timestamp:   Apache-style time of the request
    """

    request_id: str
    method: str
    url: str
    client_ip: str
    status: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "method": self.method,
            "url": self.url,
            "client_ip": self.client_ip,
            "status": self.status,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Apache-like single line, with the request id appended."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.url}" {self.status} '
            f'{self.duration_ms:.2f}ms {self.request_id}'
        )


def now_timestamp() -> str:
    return time.strftime("%d/%b/%Y:%H:%M:%S %z")


def log_request(entry: RequestLog, log_format: str = "text") -> None:
    if log_format == "json":
        logger.info(json.dumps(entry.to_dict()))
    else:
        logger.info(entry.to_text())


def setup_logging(config: AppConfig) -> None:
    """Configure logging based on config."""
    level = config.level

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("reqflow").setLevel(level)
