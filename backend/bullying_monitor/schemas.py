"""Answer model and the mapping between persisted rows and responses."""
from __future__ import annotations
import json
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from .content import Language, MAX_SCORE, MIN_SCORE, QUESTION_IDS
from .errors import RowValidationError, SurveyValidationError


Score = Annotated[StrictInt, Field(ge=MIN_SCORE, le=MAX_SCORE)]


class RiskTier(str, Enum):
	LOW = "low"
	MEDIUM = "medium"
	HIGH = "high"


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class UserRegistration(BaseModel):
	model_config = ConfigDict(frozen=True)

	first_name: str
	last_name: str
	birth_year: int = Field(ge=1900, le=2100)
	school_number: str
	class_number: str
	class_letter: str

	@field_validator("first_name", "last_name", "school_number", "class_number", "class_letter", mode="before")
	@classmethod
	def _strip_required(cls, v: Any) -> Any:
		if isinstance(v, (int, float)) and not isinstance(v, bool):
			v = str(v)
		if isinstance(v, str):
			v = v.strip()
			if not v:
				raise ValueError("must not be empty")
		return v

	@property
	def full_name(self) -> str:
		return f"{self.first_name} {self.last_name}"

	@property
	def classroom(self) -> str:
		return f"{self.class_number}-{self.class_letter}"


class SurveyResponse(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: str
	timestamp: int  # epoch milliseconds, assigned by the store
	user: UserRegistration
	answers: Dict[str, Score]


class Aggregate(BaseModel):
	group_key: str
	average_risk: float
	count: int
	tier: RiskTier


def validate_answers(answers: Mapping[str, Any], language: Language) -> Dict[str, int]:
	"""Return a clean answer mapping in question order, or raise for a partial/invalid set."""
	invalid = [
		key for key, value in answers.items()
		if key not in QUESTION_IDS
		or not isinstance(value, int) or isinstance(value, bool)
		or not MIN_SCORE <= value <= MAX_SCORE
	]
	missing = [qid for qid in QUESTION_IDS if qid not in answers]
	if missing or invalid:
		raise SurveyValidationError(language, missing=missing, invalid=invalid)
	return {qid: int(answers[qid]) for qid in QUESTION_IDS}


def _to_millis(value: Any) -> Optional[int]:
	if value is None:
		return None
	if isinstance(value, bool):
		return None
	if isinstance(value, (int, float)):
		return int(value)
	if isinstance(value, str):
		try:
			value = datetime.fromisoformat(value.replace("Z", "+00:00"))
		except ValueError:
			return None
	if isinstance(value, datetime):
		# Naive datetimes come from the store and are UTC
		if value.tzinfo is None:
			value = value.replace(tzinfo=timezone.utc)
		return (value - _EPOCH) // timedelta(milliseconds=1)
	return None


def parse_row(row: Any) -> SurveyResponse:
	"""Map a persisted row (ORM object or plain mapping) onto a SurveyResponse.

	Rows must carry every field and exactly one answer per current question,
	so aggregation never sees a partial answer set.
	"""
	if isinstance(row, Mapping):
		get = row.get
	else:
		def get(key: str) -> Any:
			return getattr(row, key, None)

	row_id = get("id")
	if not row_id:
		raise RowValidationError(None, "missing id")
	timestamp = _to_millis(get("created_at"))
	if timestamp is None:
		raise RowValidationError(str(row_id), "missing or unreadable created_at")

	answers = get("answers")
	if isinstance(answers, str):
		try:
			answers = json.loads(answers)
		except ValueError as err:
			raise RowValidationError(str(row_id), f"answers is not JSON: {err}") from err
	if not isinstance(answers, Mapping):
		raise RowValidationError(str(row_id), "answers is not an object")
	if set(answers) != set(QUESTION_IDS):
		missing = [qid for qid in QUESTION_IDS if qid not in answers]
		extra = sorted(set(answers) - set(QUESTION_IDS))
		raise RowValidationError(str(row_id), f"answer set mismatch (missing={missing}, unknown={extra})")

	try:
		return SurveyResponse(
			id=str(row_id),
			timestamp=timestamp,
			user=UserRegistration(
				first_name=get("first_name"),
				last_name=get("last_name"),
				birth_year=get("birth_year"),
				school_number=get("school_number"),
				class_number=get("class_number"),
				class_letter=get("class_letter"),
			),
			answers={qid: answers[qid] for qid in QUESTION_IDS},
		)
	except ValidationError as err:
		raise RowValidationError(str(row_id), str(err)) from err


def to_row(response: SurveyResponse) -> Dict[str, Any]:
	user = response.user
	return {
		"id": response.id,
		"created_at": (_EPOCH + timedelta(milliseconds=response.timestamp)).replace(tzinfo=None),
		"first_name": user.first_name,
		"last_name": user.last_name,
		"birth_year": user.birth_year,
		"school_number": user.school_number,
		"class_number": user.class_number,
		"class_letter": user.class_letter,
		"answers": dict(response.answers),
	}
