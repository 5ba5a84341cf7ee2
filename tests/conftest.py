# pylint: disable=redefined-outer-name
from datetime import datetime, timezone

import fakeredis
import pytest

from insights.adapters.text_generation_client import (
    AbstractTextGenerationClient,
    TextGenerationError,
)
from registry.adapters.kv_store import RedisKeyValueStore
from registry.domain.model import CaseDraft
from registry.service_layer.unit_of_work import KeyValueUnitOfWork

TEST_RECORDS_KEY = "geochild_records_test"

MODERATE_SCORES = {
    "vision": 1,
    "hearing": 2,
    "mobility": 1,
    "communication": 2,
    "learning": 1,
    "behavior": 2,
    "selfcare": 1,
}

FIXED_NOW = datetime(2025, 3, 4, 9, 30, tzinfo=timezone.utc)


class FakeTextGenerationClient(AbstractTextGenerationClient):
    """Records requests and answers with canned text or an error."""

    def __init__(self, text="Análise: concentração de casos em KaMavota.", error=None):
        self.text = text
        self.error = error
        self.requests = []

    def generate(self, instructions: str, content: str) -> str:
        self.requests.append({"instructions": instructions, "content": content})
        if self.error:
            raise TextGenerationError(self.error)
        return self.text


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis()


@pytest.fixture
def kv_store(fake_redis):
    return RedisKeyValueStore(fake_redis)


@pytest.fixture
def fake_text_client():
    return FakeTextGenerationClient()


@pytest.fixture
def uow(kv_store, fake_text_client):
    return KeyValueUnitOfWork(
        store=kv_store,
        key=TEST_RECORDS_KEY,
        text_generator_impl=fake_text_client,
    )


@pytest.fixture
def make_draft():
    """Factory for a complete, valid draft; keyword overrides replace fields."""
    def _make_draft(**overrides):
        values = dict(
            child_name="Ana Macuácua",
            id_type="Assento de Nascimento",
            id_number="110022",
            caregiver_name="Rosa Macuácua",
            caregiver_relation="Mãe",
            caregiver_phone="+258840000001",
            gender="F",
            dob="2018-05-14",
            district="KaMavota",
            diagnosis_choice="Paralisia Cerebral",
            custom_diagnosis="",
            is_clinically_confirmed=False,
            scores=dict(MODERATE_SCORES),
            lat=-25.930100,
            lng=32.604500,
        )
        values.update(overrides)
        return CaseDraft(**values)

    return _make_draft
