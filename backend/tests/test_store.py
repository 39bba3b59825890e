"""Tests for the response store and the confirmed bulk delete."""

from datetime import datetime

import pytest

from bullying_monitor.cleanup import purge_all_responses
from bullying_monitor.content import QUESTION_IDS, Language
from bullying_monitor.errors import SurveyValidationError
from bullying_monitor.models import BullyingResponse
from bullying_monitor.store import get_response, insert_response, list_responses


def complete(score=1):
    return {qid: score for qid in QUESTION_IDS}


def test_insert_and_read_back(db_session, registration):
    stored = insert_response(db_session, registration, complete(3))

    assert stored.id
    assert stored.timestamp > 0
    assert stored.user == registration
    assert stored.answers == complete(3)
    assert get_response(db_session, stored.id) == stored


def test_incomplete_submission_stores_nothing(db_session, registration):
    answers = complete()
    answers.pop("q5")
    with pytest.raises(SurveyValidationError):
        insert_response(db_session, registration, answers, language=Language.RU)
    assert db_session.query(BullyingResponse).count() == 0


def test_list_is_newest_first_and_skips_malformed_rows(db_session, registration):
    db_session.add_all([
        BullyingResponse(id="old", created_at=datetime(2024, 1, 1), answers=complete(0), **_user(registration)),
        BullyingResponse(id="new", created_at=datetime(2024, 2, 1), answers=complete(4), **_user(registration)),
        BullyingResponse(id="partial", created_at=datetime(2024, 3, 1), answers={"q1": 4}, **_user(registration)),
    ])
    db_session.commit()

    assert [r.id for r in list_responses(db_session)] == ["new", "old"]
    assert get_response(db_session, "partial") is None
    assert get_response(db_session, "missing") is None


def test_purge_declined_leaves_rows(db_session, registration):
    for _ in range(3):
        insert_response(db_session, registration, complete())
    prompts = []

    def decline(prompt):
        prompts.append(prompt)
        return False

    assert purge_all_responses(db_session, decline, Language.RU) is None
    assert prompts == ["Вы действительно хотите удалить все данные?"]
    assert len(list_responses(db_session)) == 3


@pytest.mark.parametrize("count", [0, 1, 5])
def test_purge_confirmed_wipes_everything(db_session, registration, count):
    for _ in range(count):
        insert_response(db_session, registration, complete())

    removed = purge_all_responses(db_session, lambda prompt: True)

    assert removed == count
    assert db_session.query(BullyingResponse).count() == 0


def _user(registration):
    return registration.model_dump()
