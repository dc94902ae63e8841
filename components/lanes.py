"""components.lanes — Processing lanes and the shared module registry.

A lane only benefits from a module when the module is unlocked
globally (registry level > 0) AND enabled on that lane.
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class Lane:
    """One independent processing pipeline."""
    id: int = 0
    queue: float = 0.0     # raw input waiting to be processed (u)
    heat: float = 0.0      # 0–1, one minus the latency penalty
    enabled_modules: list[str] = field(default_factory=list)

    def has_module(self, module_id: str) -> bool:
        return module_id in self.enabled_modules

    def enable(self, module_id: str) -> None:
        if module_id not in self.enabled_modules:
            self.enabled_modules.append(module_id)

    def disable(self, module_id: str) -> None:
        if module_id in self.enabled_modules:
            self.enabled_modules.remove(module_id)

    def copy(self) -> "Lane":
        return Lane(self.id, self.queue, self.heat,
                    list(self.enabled_modules))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "queue": self.queue,
            "heat": self.heat,
            "enabled_modules": list(self.enabled_modules),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Lane":
        return cls(
            id=int(data.get("id", 0)),
            queue=float(data.get("queue", 0.0)),
            heat=float(data.get("heat", 0.0)),
            enabled_modules=list(data.get("enabled_modules", [])),
        )


def unlocked(module_levels: dict[str, int], module_id: str) -> bool:
    """True when *module_id* has a registry level above zero."""
    return module_levels.get(module_id, 0) > 0
