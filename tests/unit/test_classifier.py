"""Unit tests for TopicClassifier."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from talkitout.core.exceptions import ClassificationError
from talkitout.core.models import UNKNOWN_TOPIC, ClassificationResult
from talkitout.services.classification.classifier import (
    PARSE_FALLBACK_PROMPT,
    TOPIC_SYSTEM_PROMPT,
    TRANSPORT_FALLBACK_PROMPT,
    TopicClassifier,
    parse_classification,
)
from talkitout.services.llm.base import BaseLLM


@pytest.fixture
def classifier(mock_llm):
    return TopicClassifier(mock_llm)


class TestClassify:
    async def test_happy_path(self, classifier, mock_llm):
        result = await classifier.classify("My boss moved the deadline again.")

        assert result == ClassificationResult(
            topic="Work", prompt="What made today's meeting stressful?"
        )
        assert not result.is_unknown
        mock_llm.generate.assert_awaited_once()

    async def test_request_shape(self, classifier, mock_llm):
        await classifier.classify("I went hiking")

        args, kwargs = mock_llm.generate.call_args
        assert args[0] == 'Journal entry: "I went hiking"'
        assert kwargs["system"] == TOPIC_SYSTEM_PROMPT
        assert kwargs["max_tokens"] == 100

    async def test_code_fenced_reply(self, classifier, mock_llm):
        mock_llm.generate.return_value = (
            '```json\n{"topic": "Family", "prompt": "Call your mom?"}\n```'
        )
        result = await classifier.classify("Dinner with my parents")
        assert result.topic == "Family"

    async def test_transport_failure_gives_fallback(self, classifier, mock_llm):
        mock_llm.generate.side_effect = ConnectionError("offline")

        result = await classifier.classify("anything")

        assert result.topic == UNKNOWN_TOPIC
        assert result.prompt == TRANSPORT_FALLBACK_PROMPT
        assert result.display_topic is None

    async def test_unexpected_error_gives_fallback(self, classifier, mock_llm):
        mock_llm.generate.side_effect = RuntimeError("HTTP 500")
        result = await classifier.classify("anything")
        assert result.prompt == TRANSPORT_FALLBACK_PROMPT

    async def test_invalid_json_gives_parse_fallback(self, classifier, mock_llm):
        mock_llm.generate.return_value = "Sure! The topic is work."

        result = await classifier.classify("anything")

        assert result.topic == UNKNOWN_TOPIC
        assert result.prompt == PARSE_FALLBACK_PROMPT

    async def test_missing_field_gives_parse_fallback(self, classifier, mock_llm):
        mock_llm.generate.return_value = json.dumps({"topic": "Work"})
        result = await classifier.classify("anything")
        assert result.prompt == PARSE_FALLBACK_PROMPT

    async def test_timeout_gives_fallback(self, mock_llm):
        async def slow(*_args, **_kwargs):
            await asyncio.sleep(1)
            return "{}"

        mock_llm.generate.side_effect = slow
        classifier = TopicClassifier(mock_llm, timeout=0.01)

        result = await classifier.classify("anything")

        assert result.topic == UNKNOWN_TOPIC
        assert result.prompt == TRANSPORT_FALLBACK_PROMPT

    async def test_single_attempt_by_default(self, classifier, mock_llm):
        mock_llm.generate.side_effect = ConnectionError("offline")
        await classifier.classify("anything")
        assert mock_llm.generate.await_count == 1

    async def test_retries_transient_errors_when_configured(self):
        llm = AsyncMock(spec=BaseLLM)
        llm.generate.side_effect = [
            ConnectionError("blip"),
            json.dumps({"topic": "Health", "prompt": "How did you sleep?"}),
        ]
        classifier = TopicClassifier(llm, max_attempts=2)

        result = await classifier.classify("Slept badly")

        assert result.topic == "Health"
        assert llm.generate.await_count == 2


class TestParseClassification:
    def test_valid(self):
        result = parse_classification('{"topic": "Travel", "prompt": "Where next?"}')
        assert result.topic == "Travel"
        assert result.prompt == "Where next?"

    def test_unknown_topic_is_kept(self):
        result = parse_classification('{"topic": "Unknown", "prompt": "Tell me more."}')
        assert result.is_unknown
        assert result.display_topic is None

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[1, 2]",
            '{"prompt": "x"}',
            '{"topic": 3, "prompt": "x"}',
            '{"topic": "x", "prompt": null}',
        ],
    )
    def test_rejects_malformed(self, raw):
        with pytest.raises(ClassificationError):
            parse_classification(raw)
