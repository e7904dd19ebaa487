"""Forward DNS resolution using the system resolver."""

import logging
import socket

from .errors import ResolutionError

logger = logging.getLogger(__name__)


def resolve_ipv4(domain: str) -> str:
    """Resolve a domain to one IPv4 address.

    Raises:
        ResolutionError: lookup failed (NXDOMAIN, timeout, ...). Not retried.
    """
    try:
        ip = socket.gethostbyname(domain)
    except socket.gaierror as e:
        raise ResolutionError(domain, _gai_reason(e)) from e
    except (socket.error, UnicodeError) as e:
        raise ResolutionError(domain, str(e)) from e

    logger.debug(f"Resolved {domain} -> {ip}")
    return ip


def _gai_reason(error: socket.gaierror) -> str:
    """Short code for a getaddrinfo error."""
    codes = {
        socket.EAI_NONAME: "ENOTFOUND",
        socket.EAI_AGAIN: "ETIMEOUT",
    }
    nodata = getattr(socket, "EAI_NODATA", None)
    if nodata is not None:
        codes[nodata] = "ENODATA"
    return codes.get(error.errno, error.strerror or str(error))
