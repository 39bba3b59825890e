from __future__ import annotations
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..content import Language, RESPONSE_LABELS, SURVEY_QUESTIONS, message
from ..db import get_db
from ..errors import CollaboratorError, SurveyValidationError
from ..schemas import UserRegistration
from ..store import insert_response
from .auth import request_language

router = APIRouter(prefix="/survey", tags=["survey"])

logger = logging.getLogger(__name__)


class QuestionOut(BaseModel):
	id: str
	text: str


class QuestionnaireOut(BaseModel):
	language: Language
	questions: List[QuestionOut]
	labels: List[str]


class SubmitRequest(BaseModel):
	user: UserRegistration
	# Range and completeness are checked by validate_answers for a localized error
	answers: Dict[str, Any]


class SubmitResponse(BaseModel):
	id: str
	timestamp: int
	message: str


@router.get("/questions", response_model=QuestionnaireOut)
def get_questions(language: Language = Depends(request_language)):
	return QuestionnaireOut(
		language=language,
		questions=[QuestionOut(id=q.id, text=q.text.get(language)) for q in SURVEY_QUESTIONS],
		labels=RESPONSE_LABELS[language],
	)


@router.post("/responses", response_model=SubmitResponse, status_code=201)
def submit_response(req: SubmitRequest, language: Language = Depends(request_language), db: Session = Depends(get_db)):
	try:
		stored = insert_response(db, req.user, req.answers, language=language)
	except SurveyValidationError as e:
		raise HTTPException(
			status_code=422,
			detail={"message": str(e), "missing": e.missing, "invalid": e.invalid},
		)
	except CollaboratorError as e:
		logger.warning("Saving response failed: %s", e)
		raise HTTPException(status_code=502, detail=f"{message('save_failed', language)}: {e}")
	return SubmitResponse(id=stored.id, timestamp=stored.timestamp, message=message("thank_you", language))
