from __future__ import annotations

import argparse
import logging
import math

from .bootstrap import configure_logging
from .config import get_settings
from .core.availability import render_availability


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Sales copilot context engine command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the FastAPI server exposing the copilot endpoints.")
    api_parser.add_argument("--host", default=settings.http.host)
    api_parser.add_argument("--port", type=int, default=settings.http.port)

    availability_parser = subparsers.add_parser("availability", help="Print a seller's free slots for the next 7 days.")
    availability_parser.add_argument("user_id")

    quota_parser = subparsers.add_parser("quota", help="Show a company's monthly credit admission decision.")
    quota_parser.add_argument("tenant_id")

    return parser


def _print_availability(user_id: str) -> int:
    from .services import ServiceContext

    context = ServiceContext()
    report = context.calendar.availability(user_id)
    if report is None:
        print(f"No calendar connected for user {user_id}.")
        return 1
    print(render_availability(report))
    return 0


def _print_quota(tenant_id: str) -> int:
    from .services import ServiceContext

    context = ServiceContext()
    decision = context.governor.check(tenant_id, context.now())
    remaining = "unlimited" if math.isinf(decision.remaining) else f"{decision.remaining:g}"
    print(f"tenant={tenant_id} allowed={decision.allowed} remaining={remaining}")
    return 0 if decision.allowed else 2


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    logging.getLogger(__name__).info("Sales copilot CLI starting")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "api":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
        return 0
    if args.command == "availability":
        return _print_availability(args.user_id)
    if args.command == "quota":
        return _print_quota(args.tenant_id)
    parser.print_help()  # pragma: no cover - argparse enforces choices
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
