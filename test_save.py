"""test_save.py — Versioned save envelope, save slots and autosave cadence.

Run: python test_save.py
"""
from __future__ import annotations
import json, sys, tempfile, traceback
from pathlib import Path

from core.data import load_catalog
from core.tuning import EngineTuning
from core.save import (
    SaveVersionError, SaveFormatError, to_envelope, from_envelope,
    save_to_string, load_from_string, save_state, load_state, should_autosave,
)
from components import ContractStatus, ProtocolSet
from simulation.actions import switch_protocol
from simulation.contracts import refresh_board, activate
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


def _midgame_state():
    cat = load_catalog()
    s = new_run(cat, TUNING, now=1_700_000_000.0)
    s.resources.credits = 500
    s = switch_protocol(s, cat, "legacy").state
    s = refresh_board(s, cat, TUNING)
    s = activate(s, s.contracts[0].id).state
    for _ in range(40):
        s = advance(s, cat, TUNING)
    s.meta.perks["perk_head_start"] = 1
    s.stats.prestige_ready_at = 12
    return s


def test_envelope_shape():
    s = _midgame_state()
    env = json.loads(save_to_string(s))
    assert env["version"] == 1
    assert set(env) == {"version", "data"}
    assert env["data"]["protocols_used"] == ["burst", "legacy"]
    assert isinstance(env["data"]["contracts"][0]["status"], str)
    ok("Envelope = {version, data}; protocol set stored as an ordered list")


def test_round_trip():
    s = _midgame_state()
    back = load_from_string(save_to_string(s))
    assert back.to_dict() == s.to_dict()
    assert isinstance(back.protocols_used, ProtocolSet)
    assert back.protocols_used == s.protocols_used
    assert back.active_contract().status is ContractStatus.ACTIVE
    ok("Mid-game state survives a save/load round trip")

    cat = load_catalog()
    a = advance(s, cat, TUNING)
    b = advance(back, cat, TUNING)
    assert a.to_dict() == b.to_dict()
    ok("Restored state advances identically")


def test_version_mismatch():
    s = _midgame_state()
    env = to_envelope(s)
    env["version"] = 2
    try:
        from_envelope(env)
    except SaveVersionError as exc:
        assert exc.expected == 1
        assert exc.found == 2
        assert isinstance(exc, ValueError)
    else:
        raise AssertionError("version 2 envelope was accepted")
    ok("Mismatched version raises SaveVersionError")

    try:
        load_from_string(json.dumps({"data": {}}))
    except SaveVersionError as exc:
        assert exc.found is None
    else:
        raise AssertionError("untagged envelope was accepted")
    ok("Missing version tag is a mismatch too")

    assert from_envelope(to_envelope(s, 7), 7).steps == s.steps
    ok("Explicit version accepted when both sides agree")


def test_slot_files():
    s = _midgame_state()
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "slot0.json"
        assert load_state(path=path) is None
        ok("Missing save file → None")

        written = save_state(s, path=path)
        assert written == path
        back = load_state(path=path)
        assert back.to_dict() == s.to_dict()
        ok("save_state / load_state round trip through a file")

        path.write_text(json.dumps({"version": 99, "data": {}}))
        try:
            load_state(path=path)
        except SaveVersionError:
            pass
        else:
            raise AssertionError("stale save was loaded")
        ok("Stale save file raises instead of loading")


def test_malformed_saves():
    s = _midgame_state()

    for env in ({"version": 1}, {"version": 1, "data": [1, 2]}):
        try:
            from_envelope(env)
        except SaveFormatError:
            pass
        else:
            raise AssertionError(f"accepted {env!r}")
    ok("Envelope without a data table raises SaveFormatError")

    env = to_envelope(s)
    del env["data"]["contracts"][0]["id"]
    try:
        from_envelope(env)
    except SaveFormatError as exc:
        assert isinstance(exc, ValueError)
    else:
        raise AssertionError("contract without an id was accepted")

    env = to_envelope(s)
    env["data"]["lanes"] = ["not-a-lane"]
    try:
        from_envelope(env)
    except SaveFormatError:
        pass
    else:
        raise AssertionError("garbage lane was accepted")
    ok("Malformed payload raises SaveFormatError")

    try:
        load_from_string("{not json")
    except ValueError:
        pass
    else:
        raise AssertionError("corrupt JSON was accepted")
    ok("Corrupt JSON surfaces as a ValueError")


def test_runner_rejects_bad_slot():
    import main
    from core import save as core_save

    saved_dir = core_save.SAVES_DIR
    with tempfile.TemporaryDirectory() as tmp:
        core_save.SAVES_DIR = Path(tmp)
        try:
            for text in ("{not json", json.dumps({"version": 1}),
                         json.dumps({"version": 99, "data": {}})):
                (Path(tmp) / "slot3.json").write_text(text)
                code = main.main(["--slot", "3", "--seconds", "1", "--no-save"])
                assert code == 1, text
        finally:
            core_save.SAVES_DIR = saved_dir
    ok("Runner exits 1 on corrupt, empty or stale save slots")


def test_autosave_cadence():
    s = _midgame_state()
    s.steps = 0
    assert not should_autosave(s)
    s.steps = 60
    assert should_autosave(s)
    s.steps = 61
    assert not should_autosave(s)
    s.steps = 30
    assert should_autosave(s, interval=10)
    assert not should_autosave(s, interval=0)
    ok("Autosave every 60 steps, never at step 0")


if __name__ == "__main__":
    sections = [
        ("Envelope", test_envelope_shape),
        ("Round trip", test_round_trip),
        ("Version mismatch", test_version_mismatch),
        ("Slot files", test_slot_files),
        ("Malformed saves", test_malformed_saves),
        ("Runner bad slot", test_runner_rejects_bad_slot),
        ("Autosave", test_autosave_cadence),
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
