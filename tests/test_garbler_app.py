"""Tests for the Gradio demo handlers (no server is launched)."""

from __future__ import annotations

import pytest

import garbler as gb
import garbler_app as app


def test_resolve_key_prefers_numeric_key() -> None:
    assert app.resolve_key("ignored", "0x10", 3) == 16
    assert app.resolve_key("ignored", " 42 ", 1) == 42


def test_resolve_key_uses_key_text_or_default() -> None:
    assert app.resolve_key("test", "", 1) == "test"
    assert app.resolve_key("", "", 1) == gb.DEFAULT_KEY_TEXT
    assert app.resolve_key("test", None, None) == "test"


def test_resolve_key_expands_rounds_into_key_array() -> None:
    assert app.resolve_key("test", "", 3) == gb.make_key_array(3, "test")


@pytest.mark.parametrize("mode", app.MODES)
@pytest.mark.parametrize("rounds", [1, 4])
def test_garble_then_degarble_round_trip(mode: str, rounds: int) -> None:
    garbled, status = app.do_garble(mode, "HELLO world", "test", "", rounds)
    assert status.startswith("Garbled")

    plain, status = app.do_degarble(mode, garbled, "test", "", rounds)
    assert plain == "HELLO world"
    if mode == "GARBLE-CHK":
        assert status.endswith("Verified: OK")


def test_checked_mode_reports_wrong_key() -> None:
    garbled, _ = app.do_garble("GARBLE-CHK", "HELLO", "test", "", 1)
    plain, status = app.do_degarble("GARBLE-CHK", garbled, "other", "", 1)
    assert plain == ""
    assert status.endswith("Verified: FAILED")


def test_numeric_key_from_derive_key_matches_key_text() -> None:
    numeric, _ = app.do_derive_key("test")
    assert numeric == f"0x{gb.derive_key('test'):016X}"

    by_text, _ = app.do_garble("GARBLE", "HELLO", "test", "", 1)
    by_number, _ = app.do_garble("GARBLE", "HELLO", "", numeric, 1)
    assert by_text == by_number


def test_unknown_mode_is_reported() -> None:
    assert app.do_garble("ROT13", "x", "k", "", 1) == ("", "Error: Unknown mode 'ROT13'")
    assert app.do_degarble("ROT13", "x", "k", "", 1) == ("", "Error: Unknown mode 'ROT13'")


def test_bad_numeric_key_is_reported_not_raised() -> None:
    out, status = app.do_garble("GARBLE", "x", "k", "not-a-number", 1)
    assert out == ""
    assert status.startswith("Error:")


def test_swap() -> None:
    assert app.do_swap("in", "out") == ("out", "in", "Swapped.")


def test_output_with_surrogates_is_reported_not_returned() -> None:
    # Hangul input often garbles into the surrogate range
    text = "한국어 텍스트 " * 10
    for handler in (app.do_garble, app.do_degarble):
        out, status = handler("GARBLE", text, "test", "", 1)
        assert status.startswith("Error:") or out.encode("utf-8")
        if status.startswith("Error:"):
            assert (out, status) == ("", app.SURROGATE_ERROR)


def test_displayable_rejects_lone_surrogates() -> None:
    assert app.displayable("ok", "Done.") == ("ok", "Done.")
    assert app.displayable("a\ud800b", "Done.") == ("", app.SURROGATE_ERROR)


def test_empty_key_array_is_reported_in_checked_mode(monkeypatch) -> None:
    monkeypatch.setattr(app, "resolve_key", lambda *args: [])
    out, status = app.do_garble("GARBLE-CHK", "x", "", "", 1)
    assert out == ""
    assert status.startswith("Error:")
