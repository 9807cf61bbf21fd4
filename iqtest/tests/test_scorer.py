"""
Tests for the rule-based IQ scorer.
"""
import pytest

from iqtest.engine.scorer import (
    IQ_TABLE,
    PERCENTILE_TABLE,
    Answer,
    calculate_result_from_local,
    calculate_score,
    iq_for_raw_score,
    lookup_floor,
    percentile_for_raw_score,
    round_half_up,
)
from conftest import make_question


def answer(qid, choice):
    return Answer(question_id=qid, choice=choice, time_taken=5)


class TestLookupTables:
    """Raw score -> IQ / percentile floor lookups."""

    def test_tables_are_sorted_descending(self):
        for table in (IQ_TABLE, PERCENTILE_TABLE):
            keys = [k for k, _ in table]
            assert keys == sorted(keys, reverse=True)
            assert keys[-1] == 0

    def test_contiguous_keys_from_55_to_100(self):
        keys = {k for k, _ in IQ_TABLE}
        assert set(range(55, 101)) <= keys
        assert keys - set(range(55, 101)) == {50, 45, 40, 30, 20, 10, 0}

    def test_lookup_is_monotonic(self):
        iqs = [iq_for_raw_score(s) for s in range(0, 101)]
        pcts = [percentile_for_raw_score(s) for s in range(0, 101)]
        assert iqs == sorted(iqs)
        assert pcts == sorted(pcts)

    def test_exact_keys(self):
        assert iq_for_raw_score(100) == 160
        assert percentile_for_raw_score(100) == 99.9
        assert iq_for_raw_score(99) == 158
        assert percentile_for_raw_score(99) == 99.5
        assert iq_for_raw_score(70) == 100
        assert percentile_for_raw_score(70) == 70
        assert iq_for_raw_score(0) == 15
        assert percentile_for_raw_score(0) == 1

    def test_gaps_use_floor_not_interpolation(self):
        # 54 falls between keys 50 and 55
        assert iq_for_raw_score(54) == 65
        assert percentile_for_raw_score(54) == 50
        assert iq_for_raw_score(39) == 45
        assert iq_for_raw_score(9) == 15

    def test_default_when_no_key_qualifies(self):
        assert lookup_floor(-1, IQ_TABLE, 100) == 100
        assert lookup_floor(-1, PERCENTILE_TABLE, 50.0) == 50.0


class TestRounding:

    def test_half_rounds_up(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(87.5) == 88
        assert round_half_up(70.0) == 70
        assert round_half_up(33.3333) == 33


class TestCalculateScore:

    def setup_method(self):
        self.questions = (
            [make_question(f"a{i}", "A", correct=2) for i in range(5)]
            + [make_question(f"b{i}", "B", correct=0) for i in range(5)]
        )

    def test_mixed_categories(self):
        answers = (
            [answer(f"a{i}", 2) for i in range(3)]
            + [answer(f"a{i}", 0) for i in range(3, 5)]
            + [answer(f"b{i}", 0) for i in range(4)]
            + [answer("b4", 3)]
        )

        result = calculate_score(self.questions, answers, total_time=600)

        assert result.total_questions == 10
        assert result.correct_answers == 7
        assert result.raw_score == 70
        assert result.iq_estimate == 100
        assert result.percentile == 70
        assert result.time_spent == 600

        breakdown = result.category_breakdown
        assert breakdown["A"].correct == 3
        assert breakdown["A"].total == 5
        assert breakdown["A"].percentage == pytest.approx(60.0)
        assert breakdown["B"].correct == 4
        assert breakdown["B"].percentage == pytest.approx(80.0)

    def test_no_answers(self):
        questions = self.questions[:5]
        result = calculate_score(questions, [], total_time=0)

        assert result.correct_answers == 0
        assert result.raw_score == 0
        assert result.iq_estimate == 15
        assert result.percentile == 1
        assert result.category_breakdown["A"].percentage == 0.0

    def test_all_correct(self):
        answers = [answer(q.id, q.correct_option_index) for q in self.questions]
        result = calculate_score(self.questions, answers)

        assert result.raw_score == 100
        assert result.iq_estimate == 160
        assert result.percentile == 99.9

    def test_unknown_question_ids_are_ignored(self):
        answers = [answer("a0", 2), answer("nope", 2), answer("zzz", 0)]
        result = calculate_score(self.questions, answers)

        assert result.correct_answers == 1
        assert set(result.category_breakdown) == {"A", "B"}

    def test_repeated_answers_count_once(self):
        answers = [answer("a0", 2)] * 4 + [answer("b0", 0)]
        result = calculate_score(self.questions, answers)

        assert result.correct_answers == 2
        assert result.category_breakdown["A"].correct == 1

    def test_out_of_range_choice_is_wrong(self):
        result = calculate_score(self.questions, [answer("a0", 42), answer("b0", -1)])
        assert result.correct_answers == 0

    def test_invariants(self):
        answers = [answer(q.id, 0) for q in self.questions] + [answer("a0", 2)]
        result = calculate_score(self.questions, answers)

        assert result.correct_answers <= result.total_questions
        assert sum(c.total for c in result.category_breakdown.values()) == result.total_questions
        for cat in result.category_breakdown.values():
            assert cat.correct <= cat.total
            assert 0.0 <= cat.percentage <= 100.0

    def test_raw_score_rounds_half_up(self):
        questions = [make_question(f"q{i}", "A", correct=0) for i in range(8)]
        result = calculate_score(questions, [answer("q0", 0)])

        # 1/8 = 12.5%
        assert result.raw_score == 13
        assert result.iq_estimate == 25
        assert result.percentile == 10

    def test_deterministic(self):
        answers = [answer("a0", 2), answer("b1", 0), answer("b2", 1)]
        first = calculate_score(self.questions, answers, 100)
        second = calculate_score(self.questions, answers, 100)
        assert first == second

    def test_total_time_does_not_affect_score(self):
        answers = [answer("a0", 2)]
        fast = calculate_score(self.questions, answers, 1)
        slow = calculate_score(self.questions, answers, 99999)
        assert fast.raw_score == slow.raw_score
        assert fast.iq_estimate == slow.iq_estimate

    def test_empty_question_set_raises(self):
        with pytest.raises(ValueError):
            calculate_score([], [answer("a0", 2)])

    def test_breakdown_dict(self):
        result = calculate_score(self.questions, [answer("a0", 2)])
        assert result.breakdown_dict()["A"] == {"correct": 1, "total": 5, "percentage": 20.0}


class TestLocalFallback:

    def test_recomputes_from_retained_submission(self, small_bank):
        data = {
            "answers": [
                {"questionId": "p1", "choice": 1, "timeTaken": 4},
                {"questionId": "l1", "choice": 0, "timeTaken": 9},
            ],
            "totalTime": 120,
            "questionIds": ["p1", "l1", "ghost"],
        }

        result = calculate_result_from_local(data, small_bank)

        assert result is not None
        assert result.total_questions == 2
        assert result.correct_answers == 1
        assert result.raw_score == 50
        assert result.time_spent == 120

    def test_returns_none_without_known_questions(self, small_bank):
        data = {"answers": [], "totalTime": 5, "questionIds": ["ghost"]}
        assert calculate_result_from_local(data, small_bank) is None

    def test_missing_fields(self, small_bank):
        assert calculate_result_from_local({}, small_bank) is None

    def test_non_integer_choices_are_skipped(self, small_bank):
        data = {
            "answers": [
                {"questionId": "p1", "choice": None},
                {"questionId": "p2", "choice": "x"},
                {"questionId": "p3", "choice": True},
                {"questionId": "l1", "choice": "1"},
                "not-an-answer",
            ],
            "totalTime": 1,
            "questionIds": ["p1", "p2", "p3", "l1"],
        }

        result = calculate_result_from_local(data, small_bank)

        assert result.total_questions == 4
        assert result.correct_answers == 1
        assert result.category_breakdown["logic"].correct == 1

    def test_bad_times_default_to_zero(self, small_bank):
        data = {
            "answers": [{"questionId": "p1", "choice": 1, "timeTaken": None}],
            "totalTime": "abc",
            "questionIds": ["p1"],
        }

        result = calculate_result_from_local(data, small_bank)

        assert result.correct_answers == 1
        assert result.time_spent == 0

    def test_string_question_ids_treated_as_empty(self, small_bank):
        data = {"answers": [], "totalTime": 5, "questionIds": "p1"}
        assert calculate_result_from_local(data, small_bank) is None

    def test_non_list_answers_treated_as_empty(self, small_bank):
        data = {"answers": "p1", "totalTime": 5, "questionIds": ["p1"]}

        result = calculate_result_from_local(data, small_bank)

        assert result.correct_answers == 0
        assert result.raw_score == 0
