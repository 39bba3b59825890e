"""Tests for risk aggregation and classification."""

import pytest

from bullying_monitor.content import QUESTION_IDS, Language
from bullying_monitor.schemas import RiskTier
from bullying_monitor.scoring import (
    aggregate,
    average_score,
    by_birth_year,
    by_classroom,
    by_date,
    by_school,
    classify,
    classroom_key,
    count_by,
    date_key,
    high_risk_count,
    round_score,
    school_key,
    summarize,
    tier_label,
)

DAY_MS = 24 * 60 * 60 * 1000


def answers(*scores):
    return {QUESTION_IDS[i]: s for i, s in enumerate(scores)}


class TestClassify:

    @pytest.mark.parametrize(
        "score,tier",
        [
            (2.5, RiskTier.HIGH),
            (2.4999, RiskTier.MEDIUM),
            (1.5, RiskTier.MEDIUM),
            (1.4999, RiskTier.LOW),
            (0, RiskTier.LOW),
            (4, RiskTier.HIGH),
        ],
    )
    def test_thresholds(self, score, tier):
        assert classify(score) == tier

    def test_out_of_domain_values_still_classify(self):
        assert classify(-1.0) == RiskTier.LOW
        assert classify(7.5) == RiskTier.HIGH

    def test_tier_labels_are_localized(self):
        assert tier_label(RiskTier.HIGH, Language.UZ) == "Yuqori"
        assert tier_label(RiskTier.MEDIUM, Language.RU) == "Средний"
        assert tier_label(RiskTier.LOW, Language.RU) == "Низкий"


class TestAverageScore:

    def test_mean_of_answered_questions(self, make_response):
        assert average_score(make_response(answers(4, 2, 0))) == pytest.approx(2.0)

    def test_empty_answers_average_to_zero(self, make_response):
        assert average_score(make_response({})) == 0.0

    @pytest.mark.parametrize("scores", [(0,) * 10, (4,) * 10, (0, 1, 2, 3, 4), (3,), (1, 4, 4, 0, 2, 2, 3, 1, 0, 4)])
    def test_average_stays_on_answer_scale(self, make_response, scores):
        assert 0.0 <= average_score(make_response(answers(*scores))) <= 4.0


class TestAggregate:

    def test_two_extremes_in_one_classroom(self, make_response):
        r1 = make_response(answers(4, 4, 4))
        r2 = make_response(answers(0, 0, 0))
        assert average_score(r1) == 4.0
        assert average_score(r2) == 0.0

        result = aggregate([r1, r2], classroom_key)

        assert len(result) == 1
        assert result[0].group_key == "9-A"
        assert result[0].average_risk == 2.0
        assert result[0].count == 2
        assert classify(result[0].average_risk) == RiskTier.MEDIUM
        assert result[0].tier == RiskTier.MEDIUM

    def test_every_response_weighs_the_same(self, make_response):
        # Pooled answers would give (3*4 + 10*0) / 13 = 0.92
        short = make_response(answers(4, 4, 4))
        long = make_response(answers(*([0] * 10)))

        result = aggregate([short, long], classroom_key)

        assert result[0].average_risk == 2.0

    def test_rounds_after_full_precision_mean(self, make_response):
        # Rounding member averages first would give (0.33 + 0.33 + 1.0) / 3 = 0.55
        rs = [
            make_response(answers(1, 0, 0)),
            make_response(answers(1, 0, 0)),
            make_response(answers(2, 0, 1)),
        ]
        result = aggregate(rs, classroom_key)
        assert result[0].average_risk == 0.56

    def test_exact_ties_round_up(self, make_response):
        # 0.5, 0, 0, 0 averages to 0.125
        rs = [make_response(answers(*([1] * 5 + [0] * 5)))] + [make_response(answers(*([0] * 10))) for _ in range(3)]
        assert by_classroom(rs)[0].average_risk == 0.13
        assert summarize(rs).average_risk == 0.13

    @pytest.mark.parametrize("value, shown", [(0.125, 0.13), (2.675, 2.67), (1.005, 1.0), (3.3333, 3.33), (0.0, 0.0)])
    def test_round_score_matches_fixed_point_display(self, value, shown):
        # 2.675 and 1.005 sit just below the tie in binary
        assert round_score(value) == shown

    def test_first_occurrence_order(self, make_response):
        rs = [
            make_response(answers(0), class_letter="B"),
            make_response(answers(4), class_letter="A"),
            make_response(answers(2), class_letter="B"),
        ]
        assert [a.group_key for a in aggregate(rs, classroom_key)] == ["9-B", "9-A"]

    def test_empty_input(self):
        assert aggregate([], classroom_key) == []

    def test_idempotent(self, make_response):
        rs = [
            make_response(answers(1, 2), class_letter="A"),
            make_response(answers(3, 3), class_letter="B"),
            make_response(answers(0, 4), class_letter="C"),
        ]
        assert by_classroom(rs) == by_classroom(rs)
        assert by_school(rs) == by_school(rs)


class TestSorting:

    def test_classrooms_highest_risk_first(self, make_response):
        rs = [
            make_response(answers(1, 1), class_letter="A"),
            make_response(answers(3, 3), class_letter="B"),
            make_response(answers(2, 2), class_letter="C"),
        ]
        result = by_classroom(rs)
        assert [a.average_risk for a in result] == [3.0, 2.0, 1.0]
        assert [a.group_key for a in result] == ["9-B", "9-C", "9-A"]

    def test_ties_keep_first_encountered_order(self, make_response):
        rs = [
            make_response(answers(2), school="7"),
            make_response(answers(3), school="1"),
            make_response(answers(2), school="3"),
        ]
        assert [a.group_key for a in by_school(rs)] == ["1", "7", "3"]

    def test_cohorts_and_dates_in_key_order(self, make_response):
        rs = [
            make_response(answers(1), birth_year=2011, timestamp=1709280000000 + 2 * DAY_MS),
            make_response(answers(3), birth_year=2009, timestamp=1709280000000),
            make_response(answers(2), birth_year=2010, timestamp=1709280000000 + DAY_MS),
        ]
        assert [a.group_key for a in by_birth_year(rs)] == ["2009", "2010", "2011"]
        assert [a.group_key for a in by_date(rs)] == ["2024-03-01", "2024-03-02", "2024-03-03"]


class TestCounts:

    def test_high_risk_count(self, make_response):
        rs = [
            make_response(answers(3, 2)),  # 2.5
            make_response(answers(4, 4)),
            make_response(answers(2, 2)),
            make_response(answers(0, 1)),
        ]
        assert high_risk_count(rs) == 2

    def test_count_by(self, make_response):
        rs = [make_response(answers(1), school="5"), make_response(answers(1), school="2"), make_response(answers(1), school="5")]
        assert count_by(rs, school_key) == {"5": 2, "2": 1}

    def test_date_key_is_utc(self, make_response):
        # 2024-03-01T23:30:00Z
        assert date_key(make_response(answers(1), timestamp=1709335800000)) == "2024-03-01"


class TestSummarize:

    def test_summary(self, make_response):
        rs = [
            make_response(answers(4, 4), school="5", class_letter="A"),
            make_response(answers(0, 0), school="5", class_letter="B"),
            make_response(answers(2, 2), school="8", class_letter="A"),
        ]
        stats = summarize(rs)
        assert stats.total == 3
        assert stats.high_risk_count == 1
        assert stats.average_risk == 2.0
        assert stats.tier == RiskTier.MEDIUM
        assert [a.group_key for a in stats.by_classroom] == ["9-A", "9-B"]
        assert stats.by_classroom[0].average_risk == 3.0
        assert stats.school_coverage == {"5": 2, "8": 1}
        assert stats.daily_activity == {"2024-03-01": 3}

    def test_empty_summary(self):
        stats = summarize([])
        assert stats.total == 0
        assert stats.high_risk_count == 0
        assert stats.average_risk == 0.0
        assert stats.by_classroom == []
