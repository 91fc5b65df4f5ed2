"""Sales copilot context engine.

Assembles the per-turn context package (similar examples, company knowledge,
business profile and calendar availability) behind a monthly credit gate.
"""

from __future__ import annotations

from .cli import main as main

__all__ = ["main"]
