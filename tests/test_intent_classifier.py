"""
Tests for intent classification and reply decoding.
"""

from unittest.mock import AsyncMock

import pytest

from intent_agent.core.errors import MalformedJsonError, NoChoicesError
from intent_agent.core.intents import (
    CreateProject,
    GetProjectStatistics,
    IntentClassifier,
    IntentKind,
    Invest,
    Unknown,
    decode_intent,
    extract_json_object,
)


class FakeOracle:
    def __init__(self, reply=None, error=None):
        self.ask = AsyncMock(return_value=reply, side_effect=error)
        self.assistant_name = "Teemah AI"


@pytest.mark.asyncio
async def test_extracts_json_wrapped_in_prose():
    oracle = FakeOracle('Sure! {"intent": "Invest", "project_id": "0xP", "amount": 0.5} Hope that helps.')

    intent = await IntentClassifier(oracle).classify("put half an eth into 0xP")

    assert intent == Invest(project_id="0xP", amount=0.5)
    prompt = oracle.ask.await_args.args[0]
    assert 'User message: "put half an eth into 0xP"' in prompt


@pytest.mark.asyncio
async def test_create_project_fields():
    oracle = FakeOracle('{"intent": "CreateProject", "name": "Moon", "symbol": "MOON"}')

    intent = await IntentClassifier(oracle).classify("launch Moon")

    assert intent == CreateProject(name="Moon", symbol="MOON")
    assert intent.kind.is_write


@pytest.mark.asyncio
async def test_reply_without_json_is_malformed():
    oracle = FakeOracle("I am not sure what you mean.")

    with pytest.raises(MalformedJsonError):
        await IntentClassifier(oracle).classify("hmm")


@pytest.mark.asyncio
async def test_unparseable_span_is_malformed():
    oracle = FakeOracle("{intent: Invest}")

    with pytest.raises(MalformedJsonError) as excinfo:
        await IntentClassifier(oracle).classify("hmm")
    assert excinfo.value.raw_reply == "{intent: Invest}"


@pytest.mark.asyncio
async def test_no_choices_propagates():
    oracle = FakeOracle(error=NoChoicesError("No response choices from API"))

    with pytest.raises(NoChoicesError):
        await IntentClassifier(oracle).classify("stats please")


def test_unrecognized_intent_is_unknown():
    assert decode_intent({"intent": "Flurb"}) == Unknown()
    assert decode_intent({}) == Unknown()
    assert decode_intent({"intent": 3}) == Unknown()


def test_fields_default_individually():
    intent = decode_intent({"intent": "Invest", "project_id": None, "amount": "lots"})
    assert intent == Invest(project_id="", amount=0.0)

    intent = decode_intent({"intent": "Invest", "project_id": "0xP", "amount": True})
    assert intent.amount == 0.0

    intent = decode_intent({"intent": "CreateProject", "name": 42})
    assert intent == CreateProject(name="", symbol="")


def test_integer_amount_is_accepted():
    assert decode_intent({"intent": "Invest", "project_id": "0xP", "amount": 2}).amount == 2.0


def test_parameterless_intents():
    assert decode_intent({"intent": "GetProjectStatistics"}) == GetProjectStatistics()
    assert decode_intent({"intent": "ListProjects"}).kind is IntentKind.LIST_PROJECTS


def test_extract_uses_first_and_last_brace():
    assert extract_json_object('x {"a": {"b": 1}} y') == {"a": {"b": 1}}

    with pytest.raises(MalformedJsonError):
        extract_json_object("[1, 2]")
