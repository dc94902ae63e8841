"""simulation/latency.py — Chain-depth and congestion latency model.

Pure functions, no state.  ``calculate_latency`` returns the display
latency and the 0.1–1.0 output penalty for one lane.
"""

from __future__ import annotations
from dataclasses import dataclass

from core.tuning import EngineTuning

_DEFAULT_TUNING = EngineTuning()


@dataclass(frozen=True)
class LatencyInfo:
    latency_ms: float    # display only
    penalty: float       # output multiplier, 1.0 = no loss


def calculate_latency(active_modules: int, queue: float,
                      queue_tolerance: float = 0.0,
                      reduction: float = 0.0,
                      tuning: EngineTuning | None = None) -> LatencyInfo:
    """Latency for a lane running *active_modules* with *queue* pending.

    *queue_tolerance* is buffer headroom that doesn't count as
    congestion.  *reduction* (0–1) recovers that share of the lost
    efficiency without ever pushing the penalty above 1.0.
    """
    t = tuning or _DEFAULT_TUNING
    effective_queue = max(0.0, queue - queue_tolerance)

    latency_ms = (t.latency_base_ms
                  + t.latency_ms_per_module * active_modules
                  + t.latency_ms_per_queue_unit * effective_queue)

    depth = t.depth_penalty * max(0, active_modules - t.free_depth)
    congestion = t.congestion_penalty * effective_queue
    raw = max(t.penalty_floor, 1.0 - depth - congestion)

    penalty = min(1.0, raw + reduction * (1.0 - raw))
    return LatencyInfo(latency_ms=latency_ms, penalty=penalty)
