from __future__ import annotations
import logging
from typing import Callable, Optional
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .content import Language, message
from .errors import CollaboratorError
from .models import BullyingResponse

logger = logging.getLogger(__name__)


def purge_all_responses(db: Session, confirm: Callable[[str], bool], language: Language = Language.UZ) -> Optional[int]:
	"""Delete every stored response after ``confirm`` approves the localized question.

	Returns the number of deleted rows, or None when the confirmation was
	declined (nothing is touched in that case). The delete has no filter:
	it wipes the whole table.
	"""
	if not confirm(message("confirm_delete", language)):
		logger.info("Bulk delete declined")
		return None
	try:
		res = db.execute(delete(BullyingResponse))
		db.commit()
	except SQLAlchemyError as err:
		db.rollback()
		raise CollaboratorError(str(err)) from err
	removed = res.rowcount or 0
	logger.warning("Bulk delete removed %d response rows", removed)
	return removed
