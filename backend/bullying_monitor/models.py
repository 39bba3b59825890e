from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, JSON
from .db import Base


def _new_id() -> str:
	return uuid.uuid4().hex


class BullyingResponse(Base):
	__tablename__ = "bullying_responses"
	# Store-assigned identity and creation time; rows are never updated
	id = Column(String(64), primary_key=True, default=_new_id)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
	first_name = Column(String(128), nullable=False)
	last_name = Column(String(128), nullable=False)
	birth_year = Column(Integer, nullable=False)
	school_number = Column(String(32), nullable=False)
	class_number = Column(String(16), nullable=False)
	class_letter = Column(String(8), nullable=False)
	answers = Column(JSON, nullable=False, default=dict)  # {question_id: score 0..4}
