import pytest

from photo_shopping.domain.grouping import NOISE_FACTOR, LineGrouper, group_lines, is_same_line
from photo_shopping.domain.models import WordPositionEntry as W
from photo_shopping.errors import EmptyTextFailure


def _identity(s: str) -> str:
    return s


def test_single_word():
    assert group_lines([W.create("Bag", 10, 13)], formatter=_identity) == ["Bag"]


def test_empty_input_raises_with_fixed_message():
    with pytest.raises(EmptyTextFailure) as exc:
        group_lines([])
    assert str(exc.value) == "Shopping List doesn't contain any text"


def test_x_decrease_starts_new_line_even_inside_noise_band():
    words = [W.create("Blue", 10, 13), W.create("Shoes", 11, 14), W.create("For", 9, 12), W.create("Boys", 10, 13)]
    assert group_lines(words, formatter=_identity) == ["Blue Shoes", "For Boys"]


def test_two_lines_with_distinct_y_bands():
    words = [W.create("Canon", 63, 71), W.create("Camera", 63, 71), W.create("Pink", 78, 86), W.create("shoes", 78, 86)]
    assert group_lines(words, formatter=_identity) == ["Canon Camera", "Pink shoes"]


def test_y_is_checked_against_line_baseline_not_previous_word():
    # Each word drifts 4 units from its predecessor, always within the noise
    # band of the previous word, but "c" is 8 units off the line baseline.
    words = [W.create("a", 0, 100), W.create("b", 10, 104), W.create("c", 20, 108), W.create("d", 30, 112)]
    assert group_lines(words, formatter=_identity) == ["a b", "c d"]


def test_x_is_checked_against_previous_word_not_line_start():
    # "c" is left of "b" but right of the line's first word.
    words = [W.create("a", 0, 50), W.create("b", 40, 50), W.create("c", 20, 50)]
    assert group_lines(words, formatter=_identity) == ["a b", "c"]


def test_long_drifting_line_breaks_repeatedly():
    words = [W.create(f"w{i}", i * 10, 100 + i * 3) for i in range(8)]
    # baseline 100: w0 (100), w1 (103) stay; w2 (106) breaks.
    # w2 opens a line, baseline fixed by w3 (109): w3, w4 (112) stay; w5 (115) breaks, and so on.
    assert group_lines(words, formatter=_identity) == ["w0 w1", "w2 w3 w4", "w5 w6 w7"]


def test_equal_x_and_band_edges_stay_on_line():
    words = [W.create("a", 10, 50), W.create("b", 10, 50 + NOISE_FACTOR), W.create("c", 10, 50 - NOISE_FACTOR)]
    assert group_lines(words, formatter=_identity) == ["a b c"]


def test_is_same_line_predicate():
    assert is_same_line(10, 13, 10, 13)
    assert is_same_line(11, 18, 10, 13)
    assert is_same_line(11, 8, 10, 13)
    assert not is_same_line(9, 13, 10, 13)
    assert not is_same_line(11, 19, 10, 13)
    assert not is_same_line(11, 7, 10, 13)


def test_formatter_is_applied_per_line():
    words = [W.create("Canon", 63, 71), W.create("Camera", 63, 71), W.create("Pink", 78, 86)]
    assert group_lines(words, formatter=str.upper) == ["CANON CAMERA", "PINK"]


def test_lines_formatting_to_empty_are_dropped():
    words = [W.create("Blue", 10, 13), W.create("Shoes", 11, 13), W.create("^+-", 8, 13), W.create("\n", 14, 13)]
    assert group_lines(words) == ["Blue Shoes"]


def test_only_noise_raises_empty_text():
    with pytest.raises(EmptyTextFailure):
        group_lines([W.create("^+-", 8, 13), W.create("--", 20, 13)])


def test_grouping_invariants_on_mixed_input():
    words = [
        W.create("milk", 5, 20), W.create("2L", 40, 22), W.create("eggs", 6, 45),
        W.create("bread", 4, 70), W.create("whole", 50, 72), W.create("grain", 90, 69),
    ]
    first = group_lines(words, formatter=_identity)
    assert first == group_lines(list(words), formatter=_identity)
    assert 1 <= len(first) <= len(words)
    assert " ".join(first) == " ".join(w.text for w in words)
    assert first == ["milk 2L", "eggs", "bread whole grain"]


def test_line_grouper_wraps_group_lines():
    grouper = LineGrouper(formatter=_identity)
    words = [W.create("NoteBook", 10, 15), W.create("Tea", 20, 26)]
    assert grouper.group(words) == ["NoteBook", "Tea"]
