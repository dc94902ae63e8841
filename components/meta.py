"""components.meta — Persistent meta progress and per-run statistics.

``MetaProgress`` is the only substructure that survives a prestige
reset.  ``RunStats`` is wiped with everything else.
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class MetaProgress:
    """Reputation totals, reset counter and perk levels."""
    reset_count: int = 0
    total_reputation: float = 0.0
    spent_reputation: float = 0.0
    perks: dict[str, int] = field(default_factory=dict)

    @property
    def available_reputation(self) -> float:
        return self.total_reputation - self.spent_reputation

    def perk_level(self, perk_id: str) -> int:
        return self.perks.get(perk_id, 0)

    def copy(self) -> "MetaProgress":
        return MetaProgress(self.reset_count, self.total_reputation,
                            self.spent_reputation, dict(self.perks))

    def to_dict(self) -> dict:
        return {
            "reset_count": self.reset_count,
            "total_reputation": self.total_reputation,
            "spent_reputation": self.spent_reputation,
            "perks": dict(self.perks),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MetaProgress":
        return cls(
            reset_count=int(data.get("reset_count", 0)),
            total_reputation=float(data.get("total_reputation", 0.0)),
            spent_reputation=float(data.get("spent_reputation", 0.0)),
            perks={k: int(v) for k, v in data.get("perks", {}).items()},
        )


@dataclass
class RunStats:
    """Lifetime counters for the current run.

    ``prestige_ready_at`` is the step counter value when lifetime
    payload first crossed the prestige threshold; set once, never
    overwritten.
    """
    total_payload: float = 0.0
    total_credits: float = 0.0
    playtime: float = 0.0
    contracts_completed: int = 0
    high_tier_completed: int = 0
    prestige_ready_at: int | None = None

    def copy(self) -> "RunStats":
        return RunStats(self.total_payload, self.total_credits,
                        self.playtime, self.contracts_completed,
                        self.high_tier_completed, self.prestige_ready_at)

    def to_dict(self) -> dict:
        return {
            "total_payload": self.total_payload,
            "total_credits": self.total_credits,
            "playtime": self.playtime,
            "contracts_completed": self.contracts_completed,
            "high_tier_completed": self.high_tier_completed,
            "prestige_ready_at": self.prestige_ready_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RunStats":
        ready = data.get("prestige_ready_at")
        return cls(
            total_payload=float(data.get("total_payload", 0.0)),
            total_credits=float(data.get("total_credits", 0.0)),
            playtime=float(data.get("playtime", 0.0)),
            contracts_completed=int(data.get("contracts_completed", 0)),
            high_tier_completed=int(data.get("high_tier_completed", 0)),
            prestige_ready_at=None if ready is None else int(ready),
        )
