"""test_prestige.py — Prestige readiness, reputation reward, reset and perks.

Run: python test_prestige.py
"""
from __future__ import annotations
import sys, traceback

from core.data import load_catalog
from core.tuning import EngineTuning
from simulation.prestige import (
    can_prestige, reputation_gain, reset, purchase_perk, available_reputation,
)
from simulation.actions import unlock_module, add_lane, switch_protocol
from simulation.contracts import refresh_board
from simulation.result import NoopReason
from simulation.run_state import new_run
from simulation.tick import advance

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
#  Readiness + reward
# ════════════════════════════════════════════════════════════════════════

def test_readiness():
    s = new_run(load_catalog(), TUNING)
    s.stats.total_payload = 2999.9
    assert not can_prestige(s, TUNING)
    s.stats.total_payload = 3000
    assert can_prestige(s, TUNING)
    ok("Ready exactly at 3000 lifetime payload")


def test_reward_formula():
    s = new_run(load_catalog(), TUNING)
    s.stats.total_payload = 3000
    # floor(3000 ** 0.25) = 7, +1 protocol used
    assert reputation_gain(s, TUNING) == 8.0
    ok("3000 payload, no contracts, one protocol → 8")

    s.stats.contracts_completed = 2
    s.stats.high_tier_completed = 1
    s.protocols_used.add("secure")
    assert reputation_gain(s, TUNING) == 7 + 0.5 + 0.5 + 2
    ok("Contracts and protocol diversity add to the reward")

    s.stats.contracts_completed = 1
    s.stats.high_tier_completed = 0
    assert reputation_gain(s, TUNING) == 9.25
    ok("Contract terms aren't floored (7 + 0.25 + 2 = 9.25)")


def test_reward_floor():
    s = new_run(load_catalog(), TUNING)
    s.protocols_used = type(s.protocols_used)()
    assert reputation_gain(s, TUNING) == 1.0
    ok("Reward never drops below 1")


# ════════════════════════════════════════════════════════════════════════
#  Reset
# ════════════════════════════════════════════════════════════════════════

def _played_state(cat):
    s = new_run(cat, TUNING)
    s.resources.credits = 2_000
    s = unlock_module(s, cat, "checksum").state
    s = add_lane(s, TUNING).state
    s = switch_protocol(s, cat, "secure").state
    s.upgrades["hw_buffer"] = 2
    s = refresh_board(s, cat, TUNING)
    for _ in range(30):
        s = advance(s, cat, TUNING)
    s.stats.total_payload = 4000
    s.stats.contracts_completed = 3
    s.meta.total_reputation = 5
    s.meta.spent_reputation = 2
    s.meta.perks["perk_credit_multiplier"] = 1
    return s


def test_reset_scope():
    cat = load_catalog()
    s = _played_state(cat)
    gain = reputation_gain(s, TUNING)
    out = reset(s, cat, TUNING)
    fresh = new_run(cat, TUNING)

    assert out.resources.to_dict() == fresh.resources.to_dict()
    assert out.stats.to_dict() == fresh.stats.to_dict()
    assert [l.to_dict() for l in out.lanes] == [l.to_dict() for l in fresh.lanes]
    assert out.modules == fresh.modules
    assert out.upgrades == {}
    assert out.contracts == []
    assert out.active_contract_id is None
    assert out.active_protocol == TUNING.start_protocol
    assert out.protocols_used.to_list() == [TUNING.start_protocol]
    assert out.steps == 0
    ok("Transient run state back to run-start defaults")

    assert out.meta.reset_count == s.meta.reset_count + 1
    assert out.meta.total_reputation == s.meta.total_reputation + gain
    assert out.meta.spent_reputation == s.meta.spent_reputation
    assert out.meta.perks == s.meta.perks
    ok("Meta progress carried forward and increased")

    assert s.meta.reset_count == 0
    assert s.resources.credits > 0
    ok("Reset leaves the input state alone")


def test_head_start_lanes():
    cat = load_catalog()
    s = new_run(cat, TUNING)
    s.meta.perks["perk_head_start"] = 1
    out = reset(s, cat, TUNING)
    assert len(out.lanes) == 2
    assert all(l.enabled_modules == ["decrypt"] for l in out.lanes)
    ok("Head Start perk adds a starting lane")


def test_reset_clock_marker():
    cat = load_catalog()
    s = new_run(cat, TUNING, now=1_000.0)
    assert reset(s, cat, TUNING).last_tick == 1_000.0
    assert reset(s, cat, TUNING, now=5_000.0).last_tick == 5_000.0
    ok("New run keeps or restamps the wall-clock marker")


# ════════════════════════════════════════════════════════════════════════
#  Perks
# ════════════════════════════════════════════════════════════════════════

def test_purchase_perk():
    cat = load_catalog()
    s = new_run(cat, TUNING)
    s.meta.total_reputation = 5

    res = purchase_perk(s, cat, "perk_throughput_boost")
    assert res.ok
    assert res.state.meta.perk_level("perk_throughput_boost") == 1
    assert available_reputation(res.state) == 3
    assert available_reputation(s) == 5
    ok("Perk bought with available reputation")

    s = res.state
    s = purchase_perk(s, cat, "perk_latency_shield").state
    assert available_reputation(s) == 0
    res = purchase_perk(s, cat, "perk_fragment_surge")
    assert res.reason is NoopReason.INSUFFICIENT_FUNDS
    ok("Can't overspend reputation")

    s.meta.total_reputation = 100
    s = purchase_perk(s, cat, "perk_head_start").state
    res = purchase_perk(s, cat, "perk_head_start")
    assert res.reason is NoopReason.MAX_LEVEL
    assert purchase_perk(s, cat, "perk_nope").reason is NoopReason.UNKNOWN_ID
    ok("Max level and unknown ids are no-ops")


if __name__ == "__main__":
    sections = [
        ("Readiness", test_readiness),
        ("Reward formula", test_reward_formula),
        ("Reward floor", test_reward_floor),
        ("Reset scope", test_reset_scope),
        ("Head Start", test_head_start_lanes),
        ("Clock marker", test_reset_clock_marker),
        ("Perks", test_purchase_perk),
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
