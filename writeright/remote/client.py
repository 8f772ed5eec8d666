"""
Remote Analysis Client for WriteRight
=====================================
Wraps the OpenAI chat completions API for grammar analysis and
autocomplete.

Features:
- JSON-object responses with a fixed instruction
- Tolerant parsing (wrong-shaped fields become empty lists)
- Lightweight canary probe for recovery checks

Failures (missing API key, transport errors, unparsable JSON) raise
RemoteServiceError. Nothing is retried here; retry policy belongs to
the caller.

Requires: pip install openai
"""

import json
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import openai

from config_logging import RemoteServiceError, get_logger
from ..base import IntegrationBase

__version__ = "1.0.0"

logger = get_logger('remote')

ANALYSIS_INSTRUCTION = (
    "You are a writing assistant that analyzes text and provides two types of feedback: "
    "1. Grammar corrections: identify grammar or style issues with the text. "
    "2. Autocomplete suggestions: provide possible ways to complete the text if it seems incomplete. "
    "Respond with JSON in this format: "
    "{ 'grammar': [{'incorrect': string, 'correct': string, 'context': string}], "
    "'autocomplete': [string] }"
)

AUTOCOMPLETE_INSTRUCTION = (
    "You are a writing assistant that provides intelligent autocompletions for text. "
    "Given the partial text, provide 3-5 natural, contextually appropriate ways to complete the text. "
    "Respond with JSON in this format: { 'suggestions': [string] } where each string is the "
    "complete sentence (including the original text)."
)

PROBE_TEXT = "Hello"


@dataclass(frozen=True)
class GrammarSuggestion:
    """A grammar fix proposed by the remote model."""
    incorrect: str
    correct: str
    context: str = ""


@dataclass
class RemoteAnalysis:
    """Parsed remote response."""
    grammar: List[GrammarSuggestion] = field(default_factory=list)
    autocomplete: List[str] = field(default_factory=list)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def parse_analysis(payload: Any) -> RemoteAnalysis:
    """
    Convert a decoded JSON payload into a RemoteAnalysis.

    Non-object payloads give an empty analysis; malformed grammar items
    and non-string autocomplete items are dropped.
    """
    if not isinstance(payload, dict):
        return RemoteAnalysis()

    grammar = []
    items = payload.get('grammar')
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict):
            continue
        incorrect = item.get('incorrect')
        correct = item.get('correct')
        if not isinstance(incorrect, str) or not isinstance(correct, str):
            continue
        context = item.get('context')
        grammar.append(GrammarSuggestion(
            incorrect=incorrect,
            correct=correct,
            context=context if isinstance(context, str) else "",
        ))

    return RemoteAnalysis(grammar=grammar, autocomplete=_string_list(payload.get('autocomplete')))


def parse_suggestions(payload: Any) -> List[str]:
    """Accept a bare JSON array or an object holding a suggestions array."""
    if isinstance(payload, list):
        return _string_list(payload)
    if isinstance(payload, dict):
        for key in ('suggestions', 'autocomplete'):
            if isinstance(payload.get(key), list):
                return _string_list(payload[key])
    return []


class RemoteAnalysisClient(IntegrationBase):
    """
    OpenAI-backed analysis for the online path.

    The SDK client is created on first use so a missing key only fails
    the calls that need it.
    """

    INTEGRATION_NAME = "OpenAI"
    INTEGRATION_VERSION = "1.0.0"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o",
        timeout: float = 30.0,
        base_url: Optional[str] = None,
        client: Any = None
    ):
        """
        Initialize the remote client.

        Args:
            api_key: OpenAI API key
            model: Chat model name
            timeout: Request timeout in seconds
            base_url: Alternative API endpoint
            client: Pre-built SDK client (skips lazy construction)
        """
        super().__init__()
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.base_url = base_url

        self._client = client
        self._client_lock = threading.Lock()
        self._available = client is not None or bool(api_key)
        if not self._available:
            self._error = "OpenAI API key not configured"

    def _get_client(self):
        if self._client is not None:
            return self._client

        with self._client_lock:
            if self._client is None:
                if not self.api_key:
                    raise RemoteServiceError("OpenAI API key not configured")
                kwargs: Dict[str, Any] = {'api_key': self.api_key, 'timeout': self.timeout}
                if self.base_url:
                    kwargs['base_url'] = self.base_url
                self._client = openai.OpenAI(**kwargs)
        return self._client

    def _complete_json(self, instruction: str, text: str) -> Any:
        client = self._get_client()

        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": instruction},
                    {"role": "user", "content": text},
                ],
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            self._error = str(e)
            raise RemoteServiceError(f"Remote request failed: {e}", model=self.model) from e

        content = response.choices[0].message.content if response.choices else None
        try:
            payload = json.loads(content or "")
        except (TypeError, ValueError) as e:
            self._error = f"Invalid JSON from model: {e}"
            raise RemoteServiceError("Remote response was not valid JSON", model=self.model) from e

        self._error = None
        return payload

    def analyze_sentence(self, text: str) -> RemoteAnalysis:
        """
        Ask the model for grammar fixes and completions.

        Raises:
            RemoteServiceError: On missing key, transport failure, or bad JSON
        """
        with logger.log_operation('remote_analyze', model=self.model, text_length=len(text)):
            return parse_analysis(self._complete_json(ANALYSIS_INSTRUCTION, text))

    def get_autocomplete_suggestions(self, text: str) -> List[str]:
        """
        Ask the model for 3-5 completions of partial text.

        Raises:
            RemoteServiceError: On missing key, transport failure, or bad JSON
        """
        with logger.log_operation('remote_autocomplete', model=self.model, text_length=len(text)):
            return parse_suggestions(self._complete_json(AUTOCOMPLETE_INSTRUCTION, text))

    def probe(self) -> bool:
        """Canary request used by recovery checks."""
        self.analyze_sentence(PROBE_TEXT)
        return True

    def get_status(self) -> Dict[str, Any]:
        return {
            'available': self.is_available,
            'error': self._error,
            'model': self.model,
            'timeout': self.timeout,
            'base_url': self.base_url,
        }
