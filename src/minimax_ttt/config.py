"""Search configuration.

Environment-first: `SearchConfig.from_env()` and `default_side()` read
MINIMAX_TTT_* variables so scripts and the CLI share one source of defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class SearchConfig:
    prune: bool = False  # alpha-beta
    discount_depth: bool = False  # prefer faster wins and slower losses
    transpositions: bool = False  # per-call cache of exact values

    @classmethod
    def for_side(cls, side: int) -> "SearchConfig":
        """Orchestrator defaults: cached exact values always, alpha-beta beyond 3x3."""
        return cls(prune=side > 3, transpositions=True)

    @classmethod
    def from_env(cls, base: "SearchConfig | None" = None) -> "SearchConfig":
        b = base or cls()
        return cls(
            prune=_env_flag("MINIMAX_TTT_PRUNE", b.prune),
            discount_depth=_env_flag("MINIMAX_TTT_DISCOUNT_DEPTH", b.discount_depth),
            transpositions=_env_flag("MINIMAX_TTT_TRANSPOSITIONS", b.transpositions),
        )


def default_side() -> int:
    raw = os.getenv("MINIMAX_TTT_SIDE")
    if not raw:
        return 3
    side = int(raw)
    if side < 2:
        raise ValueError(f"MINIMAX_TTT_SIDE must be at least 2, got {side}")
    return side
