from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..cleanup import purge_all_responses
from ..content import Language, message
from ..db import get_db
from ..errors import CollaboratorError, ReportGenerationError
from ..export import DOC_MEDIA_TYPE, build_report_document, export_filename
from ..reports import ReportBuilder, answered_questions
from ..schemas import RiskTier, SurveyResponse, UserRegistration
from ..scoring import DashboardStats, average_score, classify, round_score, summarize, tier_label
from ..settings import settings
from ..store import get_response, list_responses
from .auth import AdminSession, create_purge_token, get_current_admin, request_language, verify_purge_token

router = APIRouter(prefix="/admin", tags=["admin"])

logger = logging.getLogger(__name__)

# (admin session id, report kind) pairs with a generation request outstanding
_inflight: Set[Tuple[str, str]] = set()


class ResponseOut(BaseModel):
	id: str
	timestamp: int
	user: UserRegistration
	answers: Dict[str, int]
	average_score: float
	tier: RiskTier
	tier_label: str


class ResponseDetail(ResponseOut):
	questions: List[Dict[str, Any]]


class ClassroomGroup(BaseModel):
	classroom: str
	responses: List[ResponseOut]


class SchoolGroup(BaseModel):
	school: str
	classes: List[ClassroomGroup]


class ResponseList(BaseModel):
	total: int
	message: Optional[str] = None
	responses: List[ResponseOut] = []
	schools: List[SchoolGroup] = []


class AnalysisOut(BaseModel):
	language: Language
	text: str


class ExportRequest(BaseModel):
	narrative: str
	title: Optional[str] = None


class PurgeTicket(BaseModel):
	confirmation_token: str
	prompt: str
	expires_in_minutes: int


class PurgeRequest(BaseModel):
	confirmation_token: Optional[str] = None


def get_report_builder() -> ReportBuilder:
	return ReportBuilder(thinking_budget=settings.gemini_thinking_budget)


def _load(db: Session, language: Language) -> List[SurveyResponse]:
	try:
		return list_responses(db)
	except CollaboratorError as e:
		logger.warning("Loading responses failed: %s", e)
		raise HTTPException(status_code=502, detail=f"{message('load_failed', language)}: {e}")


def _to_out(r: SurveyResponse, language: Language) -> ResponseOut:
	avg = average_score(r)
	tier = classify(avg)
	return ResponseOut(
		id=r.id,
		timestamp=r.timestamp,
		user=r.user,
		answers=dict(r.answers),
		average_score=round_score(avg),
		tier=tier,
		tier_label=tier_label(tier, language),
	)


def _group(rows: List[ResponseOut]) -> List[SchoolGroup]:
	schools: Dict[str, Dict[str, List[ResponseOut]]] = {}
	for row in rows:
		classes = schools.setdefault(row.user.school_number, {})
		classes.setdefault(row.user.classroom, []).append(row)
	return [
		SchoolGroup(school=school, classes=[ClassroomGroup(classroom=c, responses=rs) for c, rs in classes.items()])
		for school, classes in schools.items()
	]


def _claim(session: AdminSession, kind: str, language: Language) -> Tuple[str, str]:
	key = (session.session_id, kind)
	if key in _inflight:
		raise HTTPException(status_code=409, detail=message("analysis_in_progress", language))
	_inflight.add(key)
	return key


@router.get("/responses", response_model=ResponseList)
def get_responses(
	grouped: bool = Query(default=False),
	language: Language = Depends(request_language),
	admin: AdminSession = Depends(get_current_admin),
	db: Session = Depends(get_db),
):
	rows = [_to_out(r, language) for r in _load(db, language)]
	if not rows:
		return ResponseList(total=0, message=message("no_data", language))
	if grouped:
		return ResponseList(total=len(rows), schools=_group(rows))
	return ResponseList(total=len(rows), responses=rows)


@router.get("/responses/{response_id}", response_model=ResponseDetail)
def get_response_detail(
	response_id: str,
	language: Language = Depends(request_language),
	admin: AdminSession = Depends(get_current_admin),
	db: Session = Depends(get_db),
):
	r = _get_or_404(db, response_id, language)
	return ResponseDetail(**_to_out(r, language).model_dump(), questions=answered_questions(r, language))


@router.get("/stats", response_model=DashboardStats)
def get_stats(
	language: Language = Depends(request_language),
	admin: AdminSession = Depends(get_current_admin),
	db: Session = Depends(get_db),
):
	return summarize(_load(db, language))


@router.post("/analysis", response_model=AnalysisOut)
async def analyze_all(
	language: Language = Depends(request_language),
	admin: AdminSession = Depends(get_current_admin),
	db: Session = Depends(get_db),
	builder: ReportBuilder = Depends(get_report_builder),
):
	responses = await run_in_threadpool(_load, db, language)
	key = _claim(admin, "aggregate", language)
	try:
		text = await builder.generate_aggregate_report(responses, language)
	except ReportGenerationError as e:
		raise HTTPException(status_code=502, detail={"message": e.message, "detail": e.detail})
	finally:
		_inflight.discard(key)
	return AnalysisOut(language=language, text=text)


@router.post("/responses/{response_id}/analysis", response_model=AnalysisOut)
async def analyze_one(
	response_id: str,
	language: Language = Depends(request_language),
	admin: AdminSession = Depends(get_current_admin),
	db: Session = Depends(get_db),
	builder: ReportBuilder = Depends(get_report_builder),
):
	r = await run_in_threadpool(_get_or_404, db, response_id, language)
	key = _claim(admin, "individual", language)
	try:
		text = await builder.generate_individual_report(r, language)
	except ReportGenerationError as e:
		raise HTTPException(status_code=502, detail={"message": e.message, "detail": e.detail})
	finally:
		_inflight.discard(key)
	return AnalysisOut(language=language, text=text)


@router.post("/export")
def export_report(
	req: ExportRequest,
	language: Language = Depends(request_language),
	admin: AdminSession = Depends(get_current_admin),
):
	content = build_report_document(req.narrative, language=language, title=req.title)
	return Response(
		content=content,
		media_type=DOC_MEDIA_TYPE,
		headers={"Content-Disposition": f'attachment; filename="{export_filename(language)}"'},
	)


@router.post("/responses/purge-request", response_model=PurgeTicket)
def request_purge(
	language: Language = Depends(request_language),
	admin: AdminSession = Depends(get_current_admin),
):
	return PurgeTicket(
		confirmation_token=create_purge_token(admin),
		prompt=message("confirm_delete", language),
		expires_in_minutes=max(1, settings.purge_confirmation_minutes),
	)


@router.delete("/responses")
def purge_responses(
	req: PurgeRequest,
	language: Language = Depends(request_language),
	admin: AdminSession = Depends(get_current_admin),
	db: Session = Depends(get_db),
):
	try:
		removed = purge_all_responses(db, lambda _prompt: verify_purge_token(req.confirmation_token, admin), language)
	except CollaboratorError as e:
		raise HTTPException(status_code=502, detail=str(e))
	if removed is None:
		raise HTTPException(status_code=400, detail=message("delete_not_confirmed", language))
	return {"deleted": removed, "message": message("deleted", language)}


def _get_or_404(db: Session, response_id: str, language: Language) -> SurveyResponse:
	try:
		r = get_response(db, response_id)
	except CollaboratorError as e:
		raise HTTPException(status_code=502, detail=f"{message('load_failed', language)}: {e}")
	if r is None:
		raise HTTPException(status_code=404, detail=message("not_found", language))
	return r
