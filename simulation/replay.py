"""simulation/replay.py — Offline catch-up in coarse chunks.

When the game was closed, ``reconcile`` replays the missed wall-clock
time by calling ``advance`` with ``chunk_seconds`` deltas, plus one
final partial chunk.  Elapsed time is clamped to ``[0, cap]`` where
the cap is ``offline_cap_hours`` plus any Offline Cap perk hours.

The latency penalty is evaluated once per chunk at that chunk's
ending queue, so a replay lands within a bounded tolerance (about
20%) of stepping the same span one second at a time.  That
approximation is accepted; don't shrink the chunk to hide it.
"""

from __future__ import annotations
from dataclasses import dataclass

from components import SimulationState
from core.data import Catalog
from core.tuning import EngineTuning
from simulation.throughput import perk_effect
from simulation.tick import advance


@dataclass(frozen=True)
class ReplaySummary:
    """Before/after deltas for the "while you were away" report."""
    elapsed_seconds: float
    steps_simulated: int
    payload_earned: float
    credits_earned: float
    fragments_earned: int


def offline_cap_seconds(state: SimulationState, catalog: Catalog,
                        tuning: EngineTuning) -> float:
    hours = tuning.offline_cap_hours + perk_effect(state, catalog,
                                                   "offline_cap_hours")
    return hours * 3600.0


def reconcile(state: SimulationState, now: float, catalog: Catalog,
              tuning: EngineTuning) -> tuple[SimulationState, ReplaySummary]:
    """Catch *state* up to wall-clock time *now* (epoch seconds)."""
    cap = offline_cap_seconds(state, catalog, tuning)
    elapsed = min(max(0.0, now - state.last_tick), cap)
    chunk = tuning.replay_chunk_seconds

    current = state
    remaining = elapsed
    steps = 0
    while remaining > chunk:
        current = advance(current, catalog, tuning, chunk)
        remaining -= chunk
        steps += 1
    if remaining > 0:
        current = advance(current, catalog, tuning, remaining)
        steps += 1

    current = current.copy()
    current.last_tick = now

    summary = ReplaySummary(
        elapsed_seconds=elapsed,
        steps_simulated=steps,
        payload_earned=current.stats.total_payload - state.stats.total_payload,
        credits_earned=current.stats.total_credits - state.stats.total_credits,
        fragments_earned=current.resources.fragments - state.resources.fragments,
    )
    if steps:
        print(f"[REPLAY] Caught up {elapsed:.0f}s in {steps} chunk(s): "
              f"+{summary.payload_earned:.1f} payload, "
              f"+{summary.credits_earned:.1f} credits, "
              f"+{summary.fragments_earned} fragments")
    return current, summary
