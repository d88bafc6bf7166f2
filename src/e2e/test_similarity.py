# src/e2e/test_similarity.py

import itertools
import pytest

from namesearch.similarity import edit_distance, similarity

SAMPLES = ["", "प्रेमबाई", "प्रेमबाइ", "पममबरई", "जयराम", "kitten", "sitting"]


def test_classic_edit_distance():
    assert edit_distance("kitten", "sitting") == 3
    assert edit_distance("", "abc") == 3


def test_one_substitution_in_eight_code_points():
    assert similarity("प्रेमबाइ", "प्रेमबाई") == pytest.approx(1 - 1 / 8)


def test_empty_pair_is_identical():
    assert similarity("", "") == 1.0
    assert similarity("", "राम") == 0.0


@pytest.mark.parametrize("a,b", list(itertools.product(SAMPLES, SAMPLES)))
def test_symmetric_and_bounded(a, b):
    s = similarity(a, b)
    assert 0.0 <= s <= 1.0
    assert s == similarity(b, a)


@pytest.mark.parametrize("s", SAMPLES)
def test_identity(s):
    assert similarity(s, s) == 1.0


def test_non_strings_count_as_empty():
    assert similarity(None, "a") == 0.0
    assert similarity(None, None) == 1.0
