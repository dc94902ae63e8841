"""components.resources — Run-local resource counters."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class ResourcePool:
    """Named counters for one run.

    scrap       raw input received by the lanes (lifetime, this run)
    payload     refined output
    credits     spendable currency
    fragments   secondary research currency
    """
    scrap: float = 0.0
    payload: float = 0.0
    credits: float = 0.0
    fragments: int = 0

    def can_afford(self, cost: float) -> bool:
        return self.credits >= cost

    def spend(self, cost: float) -> None:
        """Deduct credits.  Callers check ``can_afford`` first."""
        self.credits = max(0.0, self.credits - cost)

    def copy(self) -> "ResourcePool":
        return ResourcePool(self.scrap, self.payload, self.credits,
                            self.fragments)

    def to_dict(self) -> dict:
        return {
            "scrap": self.scrap,
            "payload": self.payload,
            "credits": self.credits,
            "fragments": self.fragments,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ResourcePool":
        return cls(
            scrap=float(data.get("scrap", 0.0)),
            payload=float(data.get("payload", 0.0)),
            credits=float(data.get("credits", 0.0)),
            fragments=int(data.get("fragments", 0)),
        )
