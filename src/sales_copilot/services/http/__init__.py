"""HTTP surface for the sales copilot."""

from .server import app, get_service_context, run_local_server

__all__ = ["app", "get_service_context", "run_local_server"]
