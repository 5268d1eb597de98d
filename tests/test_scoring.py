"""Tests for score coercion and classification."""
import pytest

from quran_screening.scoring import (
    SCORE_FIELDS,
    Classification,
    ScoreSet,
    average,
    clamp_score,
    classify,
    parse_numeric_or_zero,
)


class TestParseNumericOrZero:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (85, 85.0),
            (72.5, 72.5),
            ("90", 90.0),
            (" 66.5 ", 66.5),
            ("85abc", 85.0),
            (".5", 0.5),
            ("-10", -10.0),
        ],
    )
    def test_numeric_values(self, raw, expected) -> None:
        assert parse_numeric_or_zero(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "nilai", True, False, float("nan"), float("inf"), [90]])
    def test_unusable_values_become_zero(self, raw) -> None:
        assert parse_numeric_or_zero(raw) == 0.0


class TestClampScore:
    def test_within_range_unchanged(self) -> None:
        assert clamp_score(42.0) == 42.0

    def test_bounds(self) -> None:
        assert clamp_score(150.0) == 100.0
        assert clamp_score(-10.0) == 0.0


class TestClassify:
    @pytest.mark.parametrize(
        "scores, expected",
        [
            ((90, 90, 90), Classification.MUMTAZ),
            ((100, 100, 70), Classification.MUMTAZ),
            ((89, 90, 90), Classification.JAYYID_JIDDAN),
            ((75, 75, 75), Classification.JAYYID_JIDDAN),
            ((75, 75, 74), Classification.JAYYID),
            ((60, 60, 60), Classification.JAYYID),
            ((59, 59, 59), Classification.MAQUL),
            ((0, 0, 0), Classification.MAQUL),
        ],
    )
    def test_thresholds(self, scores, expected) -> None:
        makhraj, tajwid, kelancaran = scores
        assert classify(ScoreSet(makhraj=makhraj, tajwid=tajwid, kelancaran=kelancaran)) is expected

    def test_empty_inputs_are_maqul(self) -> None:
        scores = ScoreSet(**{field: parse_numeric_or_zero("") for field in SCORE_FIELDS})
        assert average(scores) == 0.0
        assert classify(scores) is Classification.MAQUL

    def test_missing_fields_count_as_zero(self) -> None:
        scores = ScoreSet(makhraj=90.0)
        assert (scores.tajwid, scores.kelancaran) == (0.0, 0.0)
        assert classify(scores) is Classification.MAQUL

    def test_out_of_range_values_are_not_clamped(self) -> None:
        # 150 + 90 + 90 averages to 110; classify takes scores as given
        assert classify(ScoreSet(makhraj=150, tajwid=90, kelancaran=90)) is Classification.MUMTAZ
        assert average(ScoreSet(makhraj=-30, tajwid=90, kelancaran=90)) == 50.0

    def test_labels(self) -> None:
        assert Classification.MUMTAZ.label == "Mumtaz (Istimewa)"
        assert Classification.MAQUL.label == "Maqul (Perlu Bimbingan)"


class TestScoreSet:
    def test_with_score_returns_new_value(self) -> None:
        original = ScoreSet()
        updated = original.with_score("tajwid", 70.0)
        assert original.tajwid == 0.0
        assert updated.tajwid == 70.0

    def test_with_score_rejects_unknown_field(self) -> None:
        with pytest.raises(ValueError):
            ScoreSet().with_score("fluency", 10.0)

    def test_is_frozen(self) -> None:
        with pytest.raises(Exception):
            ScoreSet().makhraj = 10.0
