# src/e2e/test_normalize.py

import pytest

from namesearch.normalize import normalize, normalize_query, replace_literal


def test_collapses_whitespace_and_trims():
    assert normalize("  प्रेमबाई  निवासी\tगांव\n") == "प्रेमबाई निवासी गांव"


def test_strips_characters_outside_the_script():
    assert normalize("Name: प्रेमबाई (42)") == "प्रेमबाई"
    assert normalize("hello world") == ""


def test_control_characters_become_spaces():
    assert normalize("राम\x00श्याम") == "राम श्याम"
    assert normalize("राम\x85श्याम") == "राम श्याम"


def test_keeps_dandas_and_dash_variants():
    s = "राम-श्याम – सीता — गीता।"
    assert normalize(s, fixes=()) == s


def test_triple_repeats_collapse_to_two():
    assert normalize("कमममममल", fixes=()) == "कममल"
    # legitimate doubling survives
    assert normalize("अम्मा", fixes=()) == "अम्मा"


def test_composed_and_decomposed_forms_compare_equal():
    assert normalize("\u0928\u093c") == normalize("\u0929") == "\u0929"


@pytest.mark.parametrize("value", [None, 42, "", "   ", b"\xe0\xa4\xb0"])
def test_total_on_odd_input(value):
    assert normalize(value) == ""


def test_seed_fixes_apply_last_and_can_be_disabled():
    assert normalize("पममबरई निवासी") == "प्रेमबाई निवासी"
    assert normalize("जयररम") == "जयराम"
    assert normalize("पममबरई निवासी", fixes=()) == "पममबरई निवासी"


@pytest.mark.parametrize("s", [
    "प्रेमबाई निवासी गांव",
    "  पममबरई   निवासी!!  ",
    "कमममममल — x — ॥ ॥",
    "abc\x00\x01 राम",
    "पपपममबरई",
    "",
])
@pytest.mark.parametrize("fixes", [None, ()])
def test_idempotent(s, fixes):
    once = normalize(s, fixes)
    assert normalize(once, fixes) == once


def test_normalize_query_returns_trimmed_raw_and_normalized():
    assert normalize_query("  प्रेमबाई ") == ("प्रेमबाई", "प्रेमबाई")
    assert normalize_query(None) == ("", "")


def test_replace_literal_longest_key_wins():
    pairs = [("ab", "X"), ("abc", "Y")]
    assert replace_literal("abc", pairs) == "Y"
    assert replace_literal("ab abc", pairs) == "X Y"


def test_replace_literal_keys_are_not_patterns():
    assert replace_literal("a.c abc", [("a.c", "X")]) == "X abc"
    assert replace_literal("(x)+", [("(x)+", "ok")]) == "ok"


def test_replace_literal_never_rescans_output():
    assert replace_literal("ab", [("a", "b"), ("b", "c")]) == "bc"


def test_replace_literal_ignores_empty_keys_and_empty_text():
    assert replace_literal("abc", [("", "Z")]) == "abc"
    assert replace_literal("", [("a", "b")]) == ""
