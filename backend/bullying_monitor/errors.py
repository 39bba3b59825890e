from __future__ import annotations
from typing import List, Optional, Sequence

from .content import Language, message


class SurveyValidationError(ValueError):
	"""Answer set rejected at submission time (incomplete or out of range)."""

	def __init__(self, language: Language, *, missing: Sequence[str] = (), invalid: Sequence[str] = ()) -> None:
		self.language = language
		self.missing: List[str] = list(missing)
		self.invalid: List[str] = list(invalid)
		key = "answer_all" if self.missing else "invalid_answers"
		super().__init__(message(key, language))


class RowValidationError(ValueError):
	"""A persisted row that does not match the response schema."""

	def __init__(self, row_id: Optional[str], reason: str) -> None:
		self.row_id = row_id
		self.reason = reason
		super().__init__(f"invalid response row {row_id!r}: {reason}")


class CollaboratorError(RuntimeError):
	"""Failure reported by an external service (generative text or the data store)."""


class ReportGenerationError(RuntimeError):
	def __init__(self, message_text: str, detail: Optional[str] = None) -> None:
		self.message = message_text
		self.detail = detail
		super().__init__(f"{message_text} ({detail})" if detail else message_text)


class MissingCredentialsError(CollaboratorError):
	"""The generative service has no API key configured."""
