# SPDX-FileCopyrightText: 2025 apiprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""apiprobe CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from ..config import ProbeSettings, load_probe_settings
from ..errors import DispatchError, ProbeTransportError, TargetValidationError
from ..http import create_default_http_client
from ..log import setup_logging
from ..models import EndpointSpec, RunResult, Status, TargetDefinition
from ..ping import PingReport
from ..runtime import ApiProbe

logger = logging.getLogger(__name__)

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_ERROR = 2


def parse_endpoint(value: str) -> EndpointSpec:
    """Parse `METHOD:PATH:STATUS`, e.g. `GET:/healthz:200`."""
    method, sep, rest = value.partition(":")
    path, sep2, status = rest.rpartition(":")
    if not sep or not sep2 or not method or not path:
        raise argparse.ArgumentTypeError(f"endpoint must look like METHOD:PATH:STATUS, got {value!r}")
    try:
        expected_status = int(status)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected status must be an integer, got {status!r}") from None
    return EndpointSpec(path=path, method=method.strip().upper(), expected_status=expected_status)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="apiprobe", description="Probe API endpoints for their expected HTTP status")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: $APIPROBE_LOG_LEVEL or WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Probe every endpoint of a target concurrently")
    run.add_argument("base_url", nargs="?", help="Base URL the endpoint paths are joined onto")
    run.add_argument(
        "-e",
        "--endpoint",
        dest="endpoints",
        action="append",
        type=parse_endpoint,
        default=[],
        metavar="METHOD:PATH:STATUS",
        help="Endpoint to probe; repeat for more",
    )
    run.add_argument("-f", "--file", help="JSON payload with base_url, endpoints and max_timeout_seconds")
    run.add_argument("-t", "--timeout", type=int, default=None, help="Per-probe timeout in seconds (default 5)")
    run.add_argument("--json", action="store_true", help="Output JSON instead of human-friendly summary")

    ping = subparsers.add_parser("ping", help="Check if a target URL is live and responds with a 2xx/3xx status")
    ping.add_argument("url", help="Target URL to ping")
    ping.add_argument("-c", "--count", type=int, default=1, help="Number of ping requests (default 1)")
    ping.add_argument("-t", "--timeout", type=float, default=None, help="Timeout in seconds per request (default 5)")
    ping.add_argument("--json", action="store_true", help="Output JSON instead of human-friendly summary")
    return parser


def build_target(args: argparse.Namespace) -> TargetDefinition:
    if args.file:
        try:
            with open(args.file, encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise TargetValidationError(f"cannot read payload {args.file}: {exc}") from exc
        if isinstance(payload, dict):
            if args.base_url:
                payload["base_url"] = args.base_url
            if args.endpoints:
                payload["endpoints"] = [endpoint.to_dict() for endpoint in args.endpoints]
            if args.timeout is not None:
                payload["max_timeout_seconds"] = args.timeout
        return TargetDefinition.from_mapping(payload)

    target = TargetDefinition(
        base_url=args.base_url or "",
        endpoints=tuple(args.endpoints),
        max_timeout_seconds=args.timeout,
    )
    target.validate()
    return target


def _print_json(data: Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _pretty_print_run(result: RunResult) -> None:
    print(f"[apiprobe] Status: {result.overall_verdict.value}")
    print(f"Request ID: {result.request_id}")
    print(f"Base URL: {result.base_url}")
    for outcome in result.outcomes:
        print(
            f"- {outcome.path}: {outcome.verdict.value} (expected {outcome.expected_status}, got {outcome.actual_status})"
        )
    print(f"Passed {result.passed_count} of {len(result.outcomes)}")


def _pretty_print_ping(report: PingReport) -> None:
    count = len(report.attempts)
    for attempt in report.attempts:
        if attempt.live:
            print(f"LIVE Target '{report.url}' responded in {attempt.elapsed_ms:.0f}ms ({attempt.sequence}/{count})")
        else:
            print(f"DOWN Target '{report.url}' returned HTTP status {attempt.status_code} ({attempt.sequence}/{count})")
    print(f"Got {report.successful} of {count} pings successful, average duration of {report.average_ms:.0f}ms")


async def _run(args: argparse.Namespace, settings: ProbeSettings) -> int:
    target = build_target(args)
    async with ApiProbe(create_default_http_client(settings), settings=settings) as probe:
        result = await probe.run(target)
    if args.json:
        _print_json(result)
    else:
        _pretty_print_run(result)
    return EXIT_PASS if result.overall_verdict == Status.PASS else EXIT_FAIL


async def _ping(args: argparse.Namespace, settings: ProbeSettings) -> int:
    async with ApiProbe(create_default_http_client(settings), settings=settings) as probe:
        report = await probe.ping(args.url, count=args.count, timeout=args.timeout)
    if args.json:
        _print_json(report)
    else:
        _pretty_print_ping(report)
    return EXIT_PASS if report.all_live else EXIT_FAIL


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: ProbeSettings = load_probe_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    handler = _run if args.command == "run" else _ping
    try:
        return asyncio.run(handler(args, settings))
    except (TargetValidationError, ValueError) as exc:
        logger.error("Invalid input: %s", exc)
        return EXIT_ERROR
    except (DispatchError, ProbeTransportError) as exc:
        logger.error("%s", exc)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
