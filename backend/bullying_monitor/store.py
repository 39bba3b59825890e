from __future__ import annotations
import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .content import Language
from .errors import CollaboratorError, RowValidationError
from .models import BullyingResponse
from .schemas import SurveyResponse, UserRegistration, parse_row, validate_answers

logger = logging.getLogger(__name__)


def insert_response(
	db: Session,
	user: UserRegistration,
	answers: Mapping[str, Any],
	*,
	language: Language = Language.UZ,
) -> SurveyResponse:
	"""Validate a complete answer set and store it as a new row."""
	clean = validate_answers(answers, language)
	row = BullyingResponse(
		first_name=user.first_name,
		last_name=user.last_name,
		birth_year=user.birth_year,
		school_number=user.school_number,
		class_number=user.class_number,
		class_letter=user.class_letter,
		answers=clean,
	)
	try:
		db.add(row)
		db.commit()
		db.refresh(row)
	except SQLAlchemyError as err:
		db.rollback()
		raise CollaboratorError(str(err)) from err
	return parse_row(row)


def list_responses(db: Session) -> List[SurveyResponse]:
	"""All valid responses, newest first. Rows that fail the schema are skipped."""
	try:
		rows = db.execute(select(BullyingResponse).order_by(BullyingResponse.created_at.desc())).scalars().all()
	except SQLAlchemyError as err:
		raise CollaboratorError(str(err)) from err
	out: List[SurveyResponse] = []
	for row in rows:
		try:
			out.append(parse_row(row))
		except RowValidationError as err:
			logger.warning("Skipping response row: %s", err)
	return out


def get_response(db: Session, response_id: str) -> Optional[SurveyResponse]:
	try:
		row = db.get(BullyingResponse, response_id)
	except SQLAlchemyError as err:
		raise CollaboratorError(str(err)) from err
	if row is None:
		return None
	try:
		return parse_row(row)
	except RowValidationError as err:
		logger.warning("Response row unreadable: %s", err)
		return None
