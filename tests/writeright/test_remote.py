"""
Tests for the Remote Analysis Client
====================================
The OpenAI SDK client is replaced by a stub exposing
chat.completions.create.
"""

import json
from types import SimpleNamespace

import openai
import pytest

from config_logging import RemoteServiceError
from writeright.remote import (
    GrammarSuggestion, RemoteAnalysisClient, parse_analysis, parse_suggestions
)


class StubCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(content=None, error=None):
    completions = StubCompletions(content, error)
    sdk = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return RemoteAnalysisClient(model="gpt-test", client=sdk), completions


class TestParseAnalysis:
    """Tests for response parsing."""

    def test_well_formed(self):
        analysis = parse_analysis({
            'grammar': [{'incorrect': 'they was', 'correct': 'they were', 'context': 'they was late'}],
            'autocomplete': ['they were late.'],
        })
        assert analysis.grammar == [GrammarSuggestion('they was', 'they were', 'they was late')]
        assert analysis.autocomplete == ['they were late.']

    def test_non_array_fields_become_empty(self):
        analysis = parse_analysis({'grammar': 'none', 'autocomplete': {'a': 1}})
        assert analysis.grammar == []
        assert analysis.autocomplete == []

    def test_non_object_payload(self):
        analysis = parse_analysis(["not", "an", "object"])
        assert analysis.grammar == [] and analysis.autocomplete == []

    def test_malformed_items_dropped(self):
        analysis = parse_analysis({
            'grammar': [
                'text',
                {'incorrect': 1, 'correct': 'x'},
                {'incorrect': 'a apple', 'correct': 'an apple'},
            ],
            'autocomplete': ['ok', 3, None],
        })
        assert analysis.grammar == [GrammarSuggestion('a apple', 'an apple', '')]
        assert analysis.autocomplete == ['ok']

    def test_parse_suggestions_shapes(self):
        assert parse_suggestions(['a', 'b']) == ['a', 'b']
        assert parse_suggestions({'suggestions': ['a']}) == ['a']
        assert parse_suggestions({'autocomplete': ['b']}) == ['b']
        assert parse_suggestions({'other': ['c']}) == []
        assert parse_suggestions("text") == []


class TestRemoteAnalysisClient:
    """Tests for RemoteAnalysisClient."""

    def test_analyze_sentence(self):
        content = json.dumps({
            'grammar': [{'incorrect': 'I has', 'correct': 'I have', 'context': 'I has a dog'}],
            'autocomplete': [],
        })
        client, completions = _client(content)

        analysis = client.analyze_sentence("I has a dog")

        assert analysis.grammar[0].correct == 'I have'
        request = completions.requests[0]
        assert request['model'] == 'gpt-test'
        assert request['response_format'] == {'type': 'json_object'}
        assert request['messages'][0]['role'] == 'system'
        assert request['messages'][1] == {'role': 'user', 'content': 'I has a dog'}

    def test_transport_error_raises(self):
        client, _ = _client(error=openai.OpenAIError("connection reset"))
        with pytest.raises(RemoteServiceError):
            client.analyze_sentence("Some text here")
        assert "connection reset" in client.error

    def test_invalid_json_raises(self):
        client, _ = _client("not json at all")
        with pytest.raises(RemoteServiceError):
            client.analyze_sentence("Some text here")

    def test_empty_content_raises(self):
        client, _ = _client(None)
        with pytest.raises(RemoteServiceError):
            client.analyze_sentence("Some text here")

    def test_missing_api_key(self):
        client = RemoteAnalysisClient(api_key=None)
        assert not client.is_available
        with pytest.raises(RemoteServiceError):
            client.analyze_sentence("Some text here")

    def test_autocomplete_suggestions(self):
        client, completions = _client(json.dumps({'suggestions': ['Thank you for your consideration.']}))
        assert client.get_autocomplete_suggestions("Thank you for your con") == [
            'Thank you for your consideration.'
        ]
        assert 'completions' in completions.requests[0]['messages'][0]['content']

    def test_probe_uses_canary_text(self):
        client, completions = _client(json.dumps({'grammar': [], 'autocomplete': []}))
        assert client.probe() is True
        assert completions.requests[0]['messages'][1]['content'] == 'Hello'

    def test_probe_failure_raises(self):
        client, _ = _client(error=openai.OpenAIError("down"))
        with pytest.raises(RemoteServiceError):
            client.probe()

    def test_status(self):
        client, _ = _client("{}")
        status = client.get_status()
        assert status['available'] is True
        assert status['model'] == 'gpt-test'
