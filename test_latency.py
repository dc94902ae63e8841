"""test_latency.py — Latency model and throughput composition.

Covers the penalty bounds, depth/congestion monotonicity, penalty
recovery, protocol compliance and the global rate helpers.

Run: python test_latency.py
"""
from __future__ import annotations
import sys, traceback

from core.data import Catalog, load_catalog
from core.tuning import EngineTuning
from simulation.latency import calculate_latency
from simulation.run_state import new_run
from simulation.actions import unlock_module, switch_protocol
from simulation.throughput import (
    lane_throughput, raw_input_rate, credit_rate, drop_interval,
    latency_reduction,
)

passed = 0
failed = 0


def ok(label: str):
    global passed
    passed += 1
    print(f"  [PASS] {label}")


def fail(label: str, detail: str = ""):
    global failed
    failed += 1
    print(f"  [FAIL] {label}")
    if detail:
        for line in detail.strip().splitlines():
            print(f"         {line}")


TUNING = EngineTuning()


# ════════════════════════════════════════════════════════════════════════
#  Latency model
# ════════════════════════════════════════════════════════════════════════

def test_penalty_bounds():
    for modules in range(0, 20):
        for queue in (0, 1, 50, 500, 5_000, 1_000_000):
            info = calculate_latency(modules, queue)
            assert 0.1 <= info.penalty <= 1.0, (modules, queue, info)
    ok("Penalty stays within [0.1, 1.0] for every depth and queue")

    info = calculate_latency(50, 1e9)
    assert info.penalty == 0.1
    ok("Extreme depth + queue clamps to the 0.1 floor")


def test_depth_threshold():
    three = calculate_latency(3, 0).penalty
    four = calculate_latency(4, 0).penalty
    assert three == 1.0
    assert four < three
    assert abs(four - 0.94) < 1e-9
    ok("4 modules (0.94) penalised, 3 modules (1.0) free")

    prev = 1.0
    for m in range(0, 16):
        p = calculate_latency(m, 0).penalty
        assert p <= prev
        prev = p
    ok("Penalty non-increasing in module count")


def test_congestion_monotonic():
    prev = 1.0
    for q in range(0, 2000, 25):
        p = calculate_latency(2, q).penalty
        assert p <= prev
        prev = p
    ok("Penalty non-increasing in queue depth")

    assert calculate_latency(2, 100).penalty == calculate_latency(2, 110, 10).penalty
    ok("Queue tolerance discounts congestion")


def test_latency_ms_display():
    info = calculate_latency(2, 20)
    assert info.latency_ms == 10 + 5 * 2 + 0.5 * 20
    ok("latency_ms = base + per-module + per-queued-unit")


def test_reduction_recovers_penalty():
    raw = calculate_latency(6, 300).penalty
    half = calculate_latency(6, 300, reduction=0.5).penalty
    assert abs(half - (raw + 0.5 * (1 - raw))) < 1e-9
    assert calculate_latency(6, 300, reduction=1.0).penalty == 1.0
    ok("Reduction recovers its share of the lost efficiency, capped at 1.0")


def test_tuning_injection():
    strict = EngineTuning(free_depth=1, depth_penalty=0.2)
    assert calculate_latency(2, 0, tuning=strict).penalty == 0.8
    assert calculate_latency(2, 0).penalty == 1.0
    ok("Injected tuning overrides the reference constants")


# ════════════════════════════════════════════════════════════════════════
#  Throughput
# ════════════════════════════════════════════════════════════════════════

def _catalog() -> Catalog:
    return load_catalog()


def test_lane_throughput_start():
    cat = _catalog()
    s = new_run(cat, TUNING)
    tp = lane_throughput(s.lanes[0], s, cat, TUNING)
    # (base 3 + decrypt 5) * burst 1.4
    assert abs(tp.capacity - 11.2) < 1e-9
    assert tp.output_multiplier == 1.0
    assert tp.active_modules == 1
    ok("Run-start lane: capacity 11.2, output 1.0, 1 active module")


def test_noncompliance_halves_output():
    cat = _catalog()
    s = new_run(cat, TUNING)
    s.resources.credits = 1_000
    s = switch_protocol(s, cat, "secure").state
    tp = lane_throughput(s.lanes[0], s, cat, TUNING)
    assert tp.output_multiplier == 0.5
    ok("Secure without Checksum halves output")

    s = unlock_module(s, cat, "checksum").state
    tp = lane_throughput(s.lanes[0], s, cat, TUNING)
    assert abs(tp.output_multiplier - 1.1) < 1e-9
    ok("Unlocking Checksum restores compliance")


def test_disabled_module_ignored():
    cat = _catalog()
    s = new_run(cat, TUNING)
    s.lanes[0].disable("decrypt")
    tp = lane_throughput(s.lanes[0], s, cat, TUNING)
    assert abs(tp.capacity - 3 * 1.4) < 1e-9
    assert tp.active_modules == 0
    ok("Disabled module contributes nothing")

    s.lanes[0].enable("compress")  # enabled but still locked
    tp = lane_throughput(s.lanes[0], s, cat, TUNING)
    assert tp.active_modules == 0
    ok("Enabled-but-locked module contributes nothing")


def test_global_rates():
    cat = _catalog()
    s = new_run(cat, TUNING)
    assert raw_input_rate(s, cat, TUNING) == 5.0
    assert credit_rate(s, cat) == 0.9
    assert drop_interval(s, cat, TUNING) == 33
    ok("Run start: 5 raw/s, 0.9 credits/payload, drop every 33 steps")

    s.upgrades["sw_routing_ai"] = 2
    s.meta.perks["perk_throughput_boost"] = 1
    assert abs(raw_input_rate(s, cat, TUNING) - 5.0 * 1.3 * 1.1) < 1e-9
    ok("Upgrade and perk multipliers compound separately")

    s.upgrades["sw_fragment_miner"] = 3
    s.meta.perks["perk_fragment_surge"] = 2
    assert drop_interval(s, cat, TUNING) == 5
    ok("Drop interval floors at 5")


def test_latency_reduction_cap():
    cat = _catalog()
    s = new_run(cat, TUNING)
    s.upgrades["hw_cooling"] = 3
    s.meta.perks["perk_latency_shield"] = 2
    assert abs(latency_reduction(s, cat, TUNING) - 0.45) < 1e-9
    capped = EngineTuning(max_latency_reduction=0.2)
    assert latency_reduction(s, cat, capped) == 0.2
    ok("Combined latency reduction sums and caps")


# ════════════════════════════════════════════════════════════════════════
#  MAIN
# ════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("Penalty bounds", test_penalty_bounds),
        ("Depth threshold", test_depth_threshold),
        ("Congestion", test_congestion_monotonic),
        ("Latency display", test_latency_ms_display),
        ("Penalty recovery", test_reduction_recovers_penalty),
        ("Tuning injection", test_tuning_injection),
        ("Lane throughput", test_lane_throughput_start),
        ("Compliance", test_noncompliance_halves_output),
        ("Disabled modules", test_disabled_module_ignored),
        ("Global rates", test_global_rates),
        ("Reduction cap", test_latency_reduction_cap),
    ]
    for name, fn in sections:
        print(f"\n=== {name} ===")
        try:
            fn()
        except Exception:
            fail(name, traceback.format_exc())

    print(f"\n{'═' * 50}")
    print(f"  Results: {passed} passed, {failed} failed")
    print(f"{'═' * 50}")
    sys.exit(1 if failed else 0)
