"""
Tests for the SQLAlchemy response store.
"""

import pytest
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError

from cohort_engine.domain.repositories.response_store import IResponseStore
from cohort_engine.infrastructure.persistence.response_repository import ResponseRepository
from cohort_engine.models import GenerationalResponse


@pytest.fixture
def repository(db_session):
    return ResponseRepository(db_session)


def test_repository_implements_store_interface(repository):
    assert isinstance(repository, IResponseStore)


@pytest.mark.asyncio
async def test_save_record(repository, db_session, analyzer):
    record = analyzer.records_for({"q1": "Born in 1972 and raised in Glasgow"})[0]

    row_id = await repository.save(record, session_id="abc", source="follow_up")

    row = db_session.get(GenerationalResponse, row_id)
    assert row.slot_id == "q1"
    assert row.raw_text == "Born in 1972 and raised in Glasgow"
    assert row.parsed_data["birth_year"] == 1972
    assert row.parsed_data["locations"] == ["Glasgow"]
    assert row.confidence_score == 1.0
    assert row.source == "follow_up"
    assert row.created_at is not None


@pytest.mark.asyncio
async def test_save_all_and_list_for_session(repository, analyzer):
    records = analyzer.records_for({"a": "born 1990", "b": "I like chess"})

    ids = await repository.save_all(records, session_id="s-9")
    await repository.save_all(analyzer.records_for({"c": "other"}), session_id="s-10")

    stored = repository.list_for_session("s-9")
    assert [row["id"] for row in stored] == ids
    assert [row["slot_id"] for row in stored] == ["a", "b"]
    assert all(row["source"] == "user_input" for row in stored)


@pytest.mark.asyncio
async def test_save_rolls_back_on_error(repository, db_session, analyzer):
    record = analyzer.records_for({"q1": "born 1990"})[0]

    with patch.object(db_session, "commit", side_effect=SQLAlchemyError("disk full")):
        with pytest.raises(SQLAlchemyError):
            await repository.save(record)

    assert db_session.query(GenerationalResponse).count() == 0
