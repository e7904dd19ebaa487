"""HTTP API for domain checks."""

import json
import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Optional
from urllib.parse import urlsplit

from .checker import DomainChecker
from .errors import ConfigurationError, QuotaExceededError
from .metrics import Metrics

DNSBL_CHECK = "dnsbl"

# Non-API paths served over GET
STATUS_ROUTES = ("/health", "/metrics")

# Request metrics label for any path not listed above
OTHER_ROUTE = "other"

# Route -> check ("dnsbl" or a provider name)
ROUTES = {
    "/api/verificar-dominios": DNSBL_CHECK,
    "/api/verificar-blacklistmaster": "blacklistmaster",
    "/api/verificar-abuseipdb": "abuseipdb",
    "/api/verificar-seo": "safebrowsing",
}

logger = logging.getLogger(__name__)


class BadRequest(ValueError):
    """Request body is not a usable domain list."""


def parse_domains(body: bytes) -> list[Any]:
    """Extract the `dominios` list from a JSON request body."""
    try:
        payload = json.loads(body or b"null")
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise BadRequest("Invalid request format. Expected { dominios: [...] }") from e

    domains = payload.get("dominios") if isinstance(payload, dict) else None
    if not isinstance(domains, list) or not domains:
        raise BadRequest("Invalid domain list.")
    return domains


class ApiHandler(BaseHTTPRequestHandler):
    """HTTP handler for the domain check endpoints."""

    # Bound by ApiServer
    checker: DomainChecker
    metrics: Metrics

    server_version = "domaincheck"

    def log_message(self, format: str, *args: object) -> None:
        logger.debug(f"{self.address_string()} - {format % args}")

    def handle_one_request(self) -> None:
        """Handle request, suppressing connection errors from health probes."""
        try:
            super().handle_one_request()
        except (ConnectionResetError, BrokenPipeError, ConnectionAbortedError):
            pass

    @property
    def route(self) -> str:
        return urlsplit(self.path).path.rstrip("/") or "/"

    @property
    def route_label(self) -> str:
        """Route name for metrics, with unknown paths folded into one series."""
        route = self.route
        return route if route in ROUTES or route in STATUS_ROUTES else OTHER_ROUTE

    # ─────────────────────────────────────────────────────────────────
    # Responses
    # ─────────────────────────────────────────────────────────────────

    def _send(self, status: int, body: bytes, content_type: str) -> None:
        self.metrics.record_request(self.route_label, status)
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    def _send_json(self, status: int, payload: dict[str, Any]) -> None:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        self._send(status, body, "application/json; charset=utf-8")

    def _method_not_allowed(self) -> None:
        if self.route in ROUTES:
            self._send_json(405, {"message": "Method not allowed. Use POST."})
        else:
            self._send_json(404, {"message": "Not found."})

    # ─────────────────────────────────────────────────────────────────
    # Methods
    # ─────────────────────────────────────────────────────────────────

    def do_GET(self) -> None:
        if self.route == "/health":
            self._send(200, b"OK", "text/plain")
        elif self.route == "/metrics":
            self._send(
                200, self.metrics.render().encode(), "text/plain; charset=utf-8"
            )
        else:
            self._method_not_allowed()

    do_HEAD = _method_not_allowed
    do_OPTIONS = _method_not_allowed
    do_PUT = _method_not_allowed
    do_PATCH = _method_not_allowed
    do_DELETE = _method_not_allowed

    def do_POST(self) -> None:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            self.close_connection = True
            self._send_json(400, {"message": "Invalid Content-Length header."})
            return
        body = self.rfile.read(length) if length > 0 else b""

        check = ROUTES.get(self.route)
        if check is None:
            self._send_json(404, {"message": "Not found."})
            return

        try:
            domains = parse_domains(body)
            if check == DNSBL_CHECK:
                report = self.checker.check_domains(domains)
            else:
                report = self.checker.check_reputation(domains, check)
        except (BadRequest, QuotaExceededError) as e:
            self._send_json(400, {"message": str(e)})
            return
        except ConfigurationError as e:
            logger.error(f"{self.route}: {e}")
            self._send_json(500, {"message": str(e)})
            return
        except Exception:
            logger.exception(f"Unexpected error handling {self.route}")
            self._send_json(500, {"message": "Internal error while checking domains."})
            return

        self.metrics.record_report(check, len(domains), report)
        logger.info(
            f"{self.route}: {len(domains)} domain(s), "
            f"{len(report.results)} result(s), {len(report.errors)} error(s)"
        )
        self._send_json(200, report.to_dict())


class ApiServer:
    """Threaded HTTP server exposing the domain checker."""

    def __init__(
        self,
        checker: DomainChecker,
        host: str,
        port: int,
        shutdown_event: threading.Event,
        metrics: Optional[Metrics] = None,
    ):
        self.checker = checker
        self.host = host
        self.port = port
        self.shutdown_event = shutdown_event
        self.metrics = metrics or Metrics()
        self.server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the API server in a background thread."""
        handler = type(
            "BoundApiHandler",
            (ApiHandler,),
            {"checker": self.checker, "metrics": self.metrics},
        )
        self.server = ThreadingHTTPServer((self.host, self.port), handler)
        self.server.timeout = 1
        # Port 0 picks a free port
        self.port = self.server.server_address[1]

        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        """Run the server until shutdown."""
        while not self.shutdown_event.is_set():
            if self.server:
                self.server.handle_request()

    def stop(self) -> None:
        """Stop serving and release the socket."""
        self.shutdown_event.set()
        if self._thread:
            self._thread.join(timeout=5)
        if self.server:
            self.server.server_close()
