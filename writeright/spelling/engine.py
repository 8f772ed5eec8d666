"""
Offline Analysis Engine for WriteRight
======================================
Dictionary spelling, pattern grammar and suffix autocomplete, all local.

Dictionaries are loaded lazily, one per language, and shared. The first
caller for a language loads it while concurrent callers for the same
language wait on a per-language lock and then receive the same instance.
A failed load publishes nothing so the next call retries.
"""

import re
import threading
from typing import Any, Callable, Dict, List, Optional, Set

from config_logging import DictionaryError, get_logger
from ..base import AnalysisResult, Correction, CorrectionKind
from ..grammar import check_grammar, context_around
from .symspell import SpellingDictionary, load_dictionary

__version__ = "1.0.0"

logger = get_logger('offline')

WORD_PATTERN = re.compile(r"\b[\w']+\b")
_HAS_DIGIT = re.compile(r'\d')

MIN_WORD_LENGTH = 3
MAX_SUGGESTIONS = 5
AUTOCOMPLETE_MIN_LENGTH = 3
AUTOCOMPLETE_ENDINGS = ('s', 'ing', 'ed', 'ly')

DictionaryLoader = Callable[[str], SpellingDictionary]


class OfflineAnalyzer:
    """
    Local spell/grammar engine.

    ``check`` raises DictionaryError when the dictionary is unavailable;
    ``analyze`` never raises and returns an empty result instead.
    """

    def __init__(
        self,
        loader: Optional[DictionaryLoader] = None,
        max_suggestions: int = MAX_SUGGESTIONS,
        context_chars: int = 20
    ):
        self._loader = loader or load_dictionary
        self.max_suggestions = max_suggestions
        self.context_chars = context_chars

        self._dictionaries: Dict[str, SpellingDictionary] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, language: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(language)
            if lock is None:
                lock = threading.Lock()
                self._locks[language] = lock
            return lock

    def get_dictionary(self, language: str) -> SpellingDictionary:
        """
        Get the dictionary for a language, loading it on first use.

        Raises:
            DictionaryError: If the dictionary cannot be loaded
        """
        dictionary = self._dictionaries.get(language)
        if dictionary is not None:
            return dictionary

        with self._lock_for(language):
            dictionary = self._dictionaries.get(language)
            if dictionary is not None:
                return dictionary

            with logger.log_operation('load_dictionary', language=language):
                try:
                    dictionary = self._loader(language)
                except DictionaryError:
                    raise
                except Exception as e:
                    raise DictionaryError(
                        f"Failed to load {language} dictionary: {e}", language=language
                    ) from e

            self._dictionaries[language] = dictionary
            return dictionary

    def initialize(self, language: str = 'en') -> bool:
        """Load the dictionary for a language. Raises DictionaryError on failure."""
        self.get_dictionary(language)
        return True

    def is_initialized(self, language: str) -> bool:
        return language in self._dictionaries

    @property
    def loaded_languages(self) -> List[str]:
        return sorted(self._dictionaries)

    def check(self, text: str, language: str = 'en') -> AnalysisResult:
        """
        Analyze text offline.

        Args:
            text: Text to analyze
            language: Supported language code

        Returns:
            AnalysisResult with spelling then grammar corrections

        Raises:
            DictionaryError: If the dictionary for ``language`` is unavailable
        """
        dictionary = self.get_dictionary(language)
        words = WORD_PATTERN.findall(text)

        corrections = self._check_spelling(text, words, dictionary)
        corrections.extend(self._check_grammar(text))

        return AnalysisResult.build(corrections, self._autocomplete(text, words))

    def analyze(self, text: str, language: str = 'en') -> AnalysisResult:
        """Same as check, but an unavailable dictionary yields an empty result."""
        try:
            return self.check(text, language)
        except DictionaryError as e:
            logger.warning("Offline analysis unavailable", language=language, reason=str(e))
            return AnalysisResult.empty()

    def _check_spelling(self, text: str, words: List[str],
                        dictionary: SpellingDictionary) -> List[Correction]:
        corrections = []
        seen: Set[str] = set()

        for word in words:
            if len(word) < MIN_WORD_LENGTH or _HAS_DIGIT.search(word):
                continue

            key = word.lower()
            if key in seen:
                continue
            seen.add(key)

            if dictionary.is_correct(word):
                continue

            start = text.find(word)
            corrections.append(Correction(
                word=word,
                suggestions=tuple(dictionary.suggest(word, self.max_suggestions)),
                kind=CorrectionKind.SPELLING,
                context=context_around(text, start, start + len(word), self.context_chars),
            ))

        return corrections

    def _check_grammar(self, text: str) -> List[Correction]:
        return [
            Correction(
                word=issue.incorrect,
                suggestions=(issue.correct,),
                kind=CorrectionKind.GRAMMAR,
                context=issue.context,
            )
            for issue in check_grammar(text)
        ]

    def _autocomplete(self, text: str, words: List[str]) -> List[str]:
        if not words:
            return []

        last_word = words[-1]
        if len(last_word) > AUTOCOMPLETE_MIN_LENGTH and text.strip().endswith(last_word):
            return [last_word + ending for ending in AUTOCOMPLETE_ENDINGS]

        return []

    def get_status(self) -> Dict[str, Any]:
        return {
            'loaded_languages': self.loaded_languages,
            'dictionaries': {
                language: dictionary.get_status()
                for language, dictionary in list(self._dictionaries.items())
            },
        }
