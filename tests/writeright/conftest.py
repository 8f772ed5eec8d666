"""
Shared fixtures for WriteRight tests.

Dictionaries are built from small frequency maps and the remote service
is replaced by FakeRemote, so no test touches the network or the
bundled corpus.
"""

import threading
import time
from typing import Callable, Dict, List, Optional

import pytest

from config_logging import RemoteServiceError
from writeright.analyzer import TextAnalyzer
from writeright.cache import TextCache
from writeright.failures import FailureTracker
from writeright.remote import GrammarSuggestion, RemoteAnalysis
from writeright.settings import SettingsStore, UserSettings
from writeright.spelling import OfflineAnalyzer, SpellingDictionary


ENGLISH_FREQUENCIES: Dict[str, int] = {
    'the': 1000, 'and': 850, 'then': 300, 'ten': 100, 'tea': 50, 'to': 950, 'a': 900,
    'an': 700, 'i': 900, 'is': 900, 'you': 900, 'for': 800, 'that': 800,
    'it': 700, 'they': 600, 'this': 600, 'was': 500, 'do': 500, 'were': 400,
    'your': 400, 'over': 300, 'going': 200, 'receive': 150, 'package': 120,
    'thank': 100, 'want': 100, 'test': 100, 'dog': 90, 'quick': 80,
    'sentence': 80, 'brown': 70, 'fox': 60, 'world': 60, 'hello': 50,
    'apple': 50, 'jumps': 40, 'lazy': 30, 'weather': 40, 'today': 60,
}

SPANISH_FREQUENCIES: Dict[str, int] = {
    'el': 1000, 'de': 900, 'la': 900, 'que': 800, 'con': 600, 'lo': 500,
    'su': 500, 'casa': 300, 'todo': 300, 'come': 200, 'amigo': 150,
    'perro': 100, 've': 100,
}

FREQUENCIES = {'en': ENGLISH_FREQUENCIES, 'es': SPANISH_FREQUENCIES}


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Poll until predicate() is true or the timeout expires."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class FakeRemote:
    """Stand-in for RemoteAnalysisClient with scripted responses."""

    def __init__(self, analysis: Optional[RemoteAnalysis] = None,
                 suggestions: Optional[List[str]] = None):
        self.analysis = analysis or RemoteAnalysis()
        self.suggestions = suggestions or []
        self.failing = False
        self.calls: List[str] = []
        self.probe_calls = 0
        self._lock = threading.Lock()

    def analyze_sentence(self, text: str) -> RemoteAnalysis:
        with self._lock:
            self.calls.append(text)
        if self.failing:
            raise RemoteServiceError("remote unavailable")
        return self.analysis

    def get_autocomplete_suggestions(self, text: str) -> List[str]:
        if self.failing:
            raise RemoteServiceError("remote unavailable")
        return list(self.suggestions)

    def probe(self) -> bool:
        with self._lock:
            self.probe_calls += 1
        self.analyze_sentence("Hello")
        return True

    def get_status(self):
        return {'available': not self.failing, 'model': 'fake'}


class CountingLoader:
    """Dictionary loader that records calls and can be told to fail."""

    def __init__(self, frequencies: Dict[str, Dict[str, int]] = FREQUENCIES):
        self.frequencies = frequencies
        self.calls: List[str] = []
        self.failing = False
        self.fail_times = 0
        self._lock = threading.Lock()

    def __call__(self, language: str) -> SpellingDictionary:
        with self._lock:
            self.calls.append(language)
            fail = self.failing or self.fail_times > 0
            if self.fail_times > 0:
                self.fail_times -= 1
        if fail:
            raise OSError(f"cannot read {language} word list")
        return SpellingDictionary.from_frequencies(language, self.frequencies[language])


@pytest.fixture
def english_dictionary() -> SpellingDictionary:
    return SpellingDictionary.from_frequencies('en', ENGLISH_FREQUENCIES)


@pytest.fixture
def loader() -> CountingLoader:
    return CountingLoader()


@pytest.fixture
def offline(loader) -> OfflineAnalyzer:
    return OfflineAnalyzer(loader=loader)


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def tracker():
    tracker = FailureTracker(threshold=5, recovery_interval=60.0)
    yield tracker
    tracker.shutdown()


@pytest.fixture
def settings_store() -> SettingsStore:
    return SettingsStore(UserSettings())


@pytest.fixture
def analyzer(settings_store, tracker, offline, remote):
    analyzer = TextAnalyzer(
        settings=settings_store,
        cache=TextCache(capacity=100, min_length=5),
        tracker=tracker,
        offline=offline,
        remote=remote,
    )
    yield analyzer
    analyzer.shutdown()


@pytest.fixture
def grammar_analysis() -> RemoteAnalysis:
    return RemoteAnalysis(
        grammar=[GrammarSuggestion("they was", "they were", "I think they was late")],
        autocomplete=["I think they were late."],
    )
