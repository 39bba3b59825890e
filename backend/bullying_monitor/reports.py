"""Narrative analysis requests for the admin dashboard.

Builds a language-specific instruction plus a JSON data payload and hands
it to the generative-text service. The service's answer is returned as-is.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .content import Language, SURVEY_QUESTIONS, answer_label, message
from .errors import CollaboratorError, MissingCredentialsError, ReportGenerationError
from .gemini_client import GeminiClient
from .prompts import AGGREGATE_TEMPLATES, INDIVIDUAL_TEMPLATES, PromptTemplate
from .schemas import SurveyResponse
from .scoring import average_score, round_score

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
	async def generate(
		self,
		prompt: str,
		*,
		system_instruction: Optional[str] = None,
		thinking_budget: Optional[int] = None,
	) -> str: ...


@dataclass(frozen=True)
class ReportRequest:
	language: Language
	system_instruction: str
	contents: str
	data: List[Dict[str, Any]]
	thinking_budget: Optional[int] = None


def build_aggregate_request(
	responses: Sequence[SurveyResponse],
	language: Language,
	*,
	template: Optional[PromptTemplate] = None,
) -> ReportRequest:
	template = template or AGGREGATE_TEMPLATES[language]
	data = [
		{
			"student": r.user.full_name,
			"school": r.user.school_number,
			"class": r.user.classroom,
			"avg_score": round_score(average_score(r)),
		}
		for r in responses
	]
	return ReportRequest(
		language=language,
		system_instruction=template.render_system_instruction(count=len(responses)),
		contents=template.render_contents(data, count=len(responses)),
		data=data,
		thinking_budget=template.thinking_budget,
	)


def build_individual_request(
	response: SurveyResponse,
	language: Language,
	*,
	template: Optional[PromptTemplate] = None,
) -> ReportRequest:
	template = template or INDIVIDUAL_TEMPLATES[language]
	data = [
		{
			"question": q.text.get(language),
			"answer": answer_label(response.answers.get(q.id), language),
		}
		for q in SURVEY_QUESTIONS
	]
	student = response.user.full_name
	return ReportRequest(
		language=language,
		system_instruction=template.render_system_instruction(student=student),
		contents=template.render_contents(data, student=student),
		data=data,
		thinking_budget=template.thinking_budget,
	)


class ReportBuilder:
	"""Sends report requests to a text generator.

	Pass ``client`` to reuse one generator (tests pass a fake); otherwise a
	fresh client is made by ``client_factory`` for each request and closed
	afterwards.
	"""

	def __init__(
		self,
		client: Optional[TextGenerator] = None,
		*,
		client_factory: Optional[Callable[[], Any]] = None,
		thinking_budget: Optional[int] = None,
	) -> None:
		self._client = client
		self._client_factory = client_factory
		self._thinking_budget = thinking_budget

	async def generate_aggregate_report(self, responses: Sequence[SurveyResponse], language: Language) -> str:
		if not responses:
			return message("no_data_for_analysis", language)
		request = build_aggregate_request(responses, language, template=self._template(AGGREGATE_TEMPLATES[language]))
		logger.info("Requesting aggregate analysis for %d responses (%s)", len(responses), language.value)
		return await self._complete(request, failure_key="analysis_failed")

	async def generate_individual_report(self, response: SurveyResponse, language: Language) -> str:
		request = build_individual_request(response, language, template=self._template(INDIVIDUAL_TEMPLATES[language]))
		logger.info("Requesting individual analysis for response %s (%s)", response.id, language.value)
		return await self._complete(request, failure_key="individual_analysis_failed")

	def _template(self, template: PromptTemplate) -> PromptTemplate:
		if self._thinking_budget is None:
			return template
		return template.with_thinking_budget(self._thinking_budget)

	async def _complete(self, request: ReportRequest, *, failure_key: str) -> str:
		language = request.language
		client = self._client
		owned = False
		try:
			if client is None:
				client = self._make_client()
				owned = True
			return await client.generate(
				request.contents,
				system_instruction=request.system_instruction,
				thinking_budget=request.thinking_budget,
			)
		except MissingCredentialsError as err:
			raise ReportGenerationError(message("api_key_missing", language), str(err)) from err
		except CollaboratorError as err:
			logger.warning("Report generation failed: %s", err)
			raise ReportGenerationError(message(failure_key, language), str(err)) from err
		finally:
			if owned and client is not None:
				await client.aclose()

	def _make_client(self) -> TextGenerator:
		factory = self._client_factory or GeminiClient
		return factory()


def answered_questions(response: SurveyResponse, language: Language) -> List[Dict[str, Any]]:
	"""Question/answer pairs for the detail view, in canonical question order."""
	return [
		{
			"id": q.id,
			"question": q.text.get(language),
			"score": response.answers.get(q.id),
			"answer": answer_label(response.answers.get(q.id), language),
		}
		for q in SURVEY_QUESTIONS
	]
