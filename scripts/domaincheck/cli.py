#!/usr/bin/env python3
"""
Domain Checker - Checks domains against DNSBLs and reputation APIs.

Serves a JSON API that receives a list of domains, resolves each one to an
IP and checks it against DNS-based blocklists (DNSBL/URIBL), BlacklistMaster,
AbuseIPDB or Google Safe Browsing.

Environment Variables:
    DOMAINCHECK_HOST            Listen address (default: 0.0.0.0)
    DOMAINCHECK_PORT            Listen port (default: 8080)
    DOMAINCHECK_MAX_DOMAINS     Max domains per request, 0 = unlimited (default: 100)
    DOMAINCHECK_DNS_POLICY      Timeout/SERVFAIL handling: tolerant|strict (default: tolerant)
    DOMAINCHECK_DNS_TIMEOUT     DNS query timeout in seconds (default: 5)
    DOMAINCHECK_HTTP_TIMEOUT    HTTP API timeout in seconds (default: 10)
    DOMAINCHECK_WORKERS         Domains checked in parallel (default: 4)
    DOMAINCHECK_LISTS           Comma-separated DNSBL hosts (default: all built-in)
    DOMAINCHECK_SOURCES_FILE    YAML file with additional DNSBLs
    DOMAINCHECK_PROVIDERS       Comma-separated providers to enable (default: those with a key)
    BLACKLISTMASTER_API_KEY     BlacklistMaster key (API_KEY is accepted too)
    ABUSEIPDB_API_KEY           AbuseIPDB key
    SAFE_BROWSING_API_KEY       Google Safe Browsing key

Usage:
    domaincheck [--host HOST] [--port PORT] [--policy tolerant|strict]
    domaincheck --check-once --domains example.com,example.org [--provider NAME]
"""

import argparse
import json
import logging
import signal
import sys
import threading

from .checker import DomainChecker
from .config import CheckerConfig
from .errors import DomainCheckError
from .server import ApiServer
from .validator import normalize_domains

# Event for graceful shutdown
shutdown_event = threading.Event()


def signal_handler(signum, frame):
    """Handle termination signals"""
    logging.info(f"Received signal {signum}, initiating shutdown...")
    shutdown_event.set()


def setup_logging(verbose: bool = False):
    """Configure logging"""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check domains against DNSBLs and reputation APIs"
    )

    parser.add_argument("--host", type=str, default=None, help="Listen address")
    parser.add_argument("--port", type=int, default=None, help="Listen port")
    parser.add_argument(
        "--policy",
        choices=["tolerant", "strict"],
        default=None,
        help="DNSBL timeout/SERVFAIL handling (default: tolerant)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Domains checked in parallel (default: 4)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--check-once",
        action="store_true",
        help="Check --domains, print the JSON report and exit",
    )
    parser.add_argument(
        "--domains",
        type=str,
        default="",
        help="Comma-separated domains to check (with --check-once)",
    )
    parser.add_argument(
        "--provider",
        type=str,
        default="",
        help="Reputation provider for --check-once (default: DNSBLs)",
    )
    return parser


def check_once(checker: DomainChecker, domains: list[str], provider: str) -> int:
    """Run a single check, print the report and return an exit code."""
    logger = logging.getLogger(__name__)

    if provider:
        report = checker.check_reputation(domains, provider)
    else:
        report = checker.check_domains(domains)

    print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))

    listed = report.listed_count
    if listed:
        logger.warning(f"SUMMARY: {listed} of {len(domains)} domain(s) listed")
        return 1
    logger.info(f"SUMMARY: No listings ({len(report.errors)} error(s))")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    config = CheckerConfig.from_env()
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.policy:
        config.dns_policy = args.policy
    if args.workers is not None:
        config.workers = args.workers

    try:
        config.validate()
        checker = DomainChecker(config)
    except DomainCheckError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    # === CHECK-ONCE MODE ===
    if args.check_once:
        domains = normalize_domains(args.domains.split(","))
        if not domains:
            logger.error("No domains to check. Use --domains")
            return 2
        try:
            return check_once(checker, domains, args.provider.lower())
        except DomainCheckError as e:
            logger.error(str(e))
            return 2

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    logger.info("=" * 50)
    logger.info("Domain Checker Starting")
    logger.info("=" * 50)
    logger.info(f"Listening on: {config.host}:{config.port}")
    logger.info(f"DNS policy: {config.dns_policy}")
    logger.info(f"Max domains per request: {config.max_domains or 'unlimited'}")
    logger.info(f"Workers: {config.workers}")
    logger.info(f"DNSBLs: {len(checker.sources)}")
    providers = config.enabled_providers()
    logger.info(f"Reputation providers: {', '.join(providers) or 'none'}")

    server = ApiServer(checker, config.host, config.port, shutdown_event)
    server.start()
    logger.info(f"API server started on port {server.port}")

    shutdown_event.wait()
    server.stop()
    logger.info("Domain Checker stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
