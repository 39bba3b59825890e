"""Risk aggregation and classification over survey responses.

Everything here is a pure function of its arguments. Scores are on the
0-4 answer scale; a response's average is the mean of its answered
questions, and a group's average is the mean of its members' averages,
so every response weighs the same regardless of how many answers it has.
"""
from __future__ import annotations
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Iterable, List, Sequence

from pydantic import BaseModel

from .content import Language, message
from .schemas import Aggregate, RiskTier, SurveyResponse


HIGH_RISK_THRESHOLD = 2.5
MEDIUM_RISK_THRESHOLD = 1.5

KeyFn = Callable[[SurveyResponse], str]


def round_score(value: float) -> float:
	"""Two decimals, ties rounded away from zero on the exact binary value."""
	return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def average_score(response: SurveyResponse) -> float:
	values = list(response.answers.values())
	if not values:
		# 0/0 is treated as no reported risk
		return 0.0
	return sum(values) / len(values)


def classify(score: float) -> RiskTier:
	if score >= HIGH_RISK_THRESHOLD:
		return RiskTier.HIGH
	if score >= MEDIUM_RISK_THRESHOLD:
		return RiskTier.MEDIUM
	return RiskTier.LOW


_TIER_MESSAGE_KEYS = {
	RiskTier.HIGH: "high_risk",
	RiskTier.MEDIUM: "medium_risk",
	RiskTier.LOW: "low_risk",
}


def tier_label(tier: RiskTier, language: Language) -> str:
	return message(_TIER_MESSAGE_KEYS[tier], language)


def high_risk_count(responses: Iterable[SurveyResponse]) -> int:
	return sum(1 for r in responses if average_score(r) >= HIGH_RISK_THRESHOLD)


# ---- group keys ----

def classroom_key(response: SurveyResponse) -> str:
	return response.user.classroom


def school_key(response: SurveyResponse) -> str:
	return response.user.school_number


def birth_year_key(response: SurveyResponse) -> str:
	return str(response.user.birth_year)


def date_key(response: SurveyResponse) -> str:
	return datetime.fromtimestamp(response.timestamp / 1000, tz=timezone.utc).date().isoformat()


# ---- aggregation ----

def aggregate(responses: Iterable[SurveyResponse], key_fn: KeyFn) -> List[Aggregate]:
	"""One Aggregate per distinct key, in first-occurrence order."""
	totals: Dict[str, float] = {}
	counts: Dict[str, int] = {}
	for r in responses:
		key = key_fn(r)
		if key not in totals:
			totals[key] = 0.0
			counts[key] = 0
		totals[key] += average_score(r)
		counts[key] += 1
	out: List[Aggregate] = []
	for key, total in totals.items():
		# Round once, after full-precision accumulation; the badge follows the shown value
		shown = round_score(total / counts[key])
		out.append(Aggregate(group_key=key, average_risk=shown, count=counts[key], tier=classify(shown)))
	return out


def _highest_risk_first(aggregates: List[Aggregate]) -> List[Aggregate]:
	# sorted() is stable, so equal averages keep first-encountered order
	return sorted(aggregates, key=lambda a: a.average_risk, reverse=True)


def by_classroom(responses: Iterable[SurveyResponse]) -> List[Aggregate]:
	return _highest_risk_first(aggregate(responses, classroom_key))


def by_school(responses: Iterable[SurveyResponse]) -> List[Aggregate]:
	return _highest_risk_first(aggregate(responses, school_key))


def by_birth_year(responses: Iterable[SurveyResponse]) -> List[Aggregate]:
	return sorted(aggregate(responses, birth_year_key), key=lambda a: a.group_key)


def by_date(responses: Iterable[SurveyResponse]) -> List[Aggregate]:
	return sorted(aggregate(responses, date_key), key=lambda a: a.group_key)


def count_by(responses: Iterable[SurveyResponse], key_fn: KeyFn) -> Dict[str, int]:
	counts: Dict[str, int] = {}
	for r in responses:
		key = key_fn(r)
		counts[key] = counts.get(key, 0) + 1
	return counts


class DashboardStats(BaseModel):
	total: int
	high_risk_count: int
	average_risk: float
	tier: RiskTier
	by_classroom: List[Aggregate]
	by_school: List[Aggregate]
	by_birth_year: List[Aggregate]
	by_date: List[Aggregate]
	school_coverage: Dict[str, int]
	daily_activity: Dict[str, int]


def summarize(responses: Sequence[SurveyResponse]) -> DashboardStats:
	overall = round_score(sum(average_score(r) for r in responses) / len(responses)) if responses else 0.0
	return DashboardStats(
		total=len(responses),
		high_risk_count=high_risk_count(responses),
		average_risk=overall,
		tier=classify(overall),
		by_classroom=by_classroom(responses),
		by_school=by_school(responses),
		by_birth_year=by_birth_year(responses),
		by_date=by_date(responses),
		school_coverage=count_by(responses, school_key),
		daily_activity=dict(sorted(count_by(responses, date_key).items())),
	)
