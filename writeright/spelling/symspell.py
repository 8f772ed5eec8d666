"""
SymSpell Dictionaries for WriteRight
====================================
Per-language spelling dictionaries backed by symspellpy.

Features:
- Edit distance lookup with frequency-ranked suggestions
- English from the frequency dictionary bundled with symspellpy
- Other languages seeded from pyspellchecker word frequencies
- Custom word list support

Requires: pip install symspellpy pyspellchecker
"""

import re
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from symspellpy import SymSpell, Verbosity

from config_logging import DictionaryError, get_logger
from ..base import IntegrationBase

__version__ = "1.0.0"

logger = get_logger('spelling')

# English suffixes that attach to a known stem
_CONTRACTION_SUFFIXES = ("n't", "'re", "'ll", "'ve", "'s", "'d", "'m")
_IRREGULAR_CONTRACTIONS = frozenset({"can't", "won't", "shan't", "ain't"})
_APOSTROPHES = re.compile(r"[‘’`]")


def preserve_case(original: str, corrected: str) -> str:
    """Carry the capitalisation pattern of ``original`` onto ``corrected``."""
    if len(original) > 1 and original.isupper():
        return corrected.upper()
    if original[:1].isupper():
        return corrected[:1].upper() + corrected[1:]
    return corrected


class SpellingDictionary(IntegrationBase):
    """
    SymSpell-backed dictionary for one language.

    Instances are built by the loaders below and are fully populated
    before they are handed out.
    """

    INTEGRATION_NAME = "SymSpell"
    INTEGRATION_VERSION = "1.0.0"

    # Default dictionary filename (bundled with symspellpy)
    FREQUENCY_DICT = "frequency_dictionary_en_82_765.txt"

    def __init__(
        self,
        language: str,
        max_edit_distance: int = 2,
        prefix_length: int = 7
    ):
        """
        Create an empty dictionary.

        Args:
            language: Language code this dictionary serves
            max_edit_distance: Maximum edit distance for corrections (1-3)
            prefix_length: Length of prefix to use for lookup
        """
        super().__init__()
        self.language = language
        self.max_edit_distance = max_edit_distance
        self.prefix_length = prefix_length

        self._sym_spell = SymSpell(
            max_dictionary_edit_distance=max_edit_distance,
            prefix_length=prefix_length
        )
        self._custom_words: Set[str] = set()

    @classmethod
    def from_frequencies(
        cls,
        language: str,
        frequencies: Mapping[str, int],
        **kwargs
    ) -> 'SpellingDictionary':
        """Build a dictionary from an explicit word -> count mapping."""
        dictionary = cls(language, **kwargs)
        for word, count in frequencies.items():
            dictionary._sym_spell.create_dictionary_entry(word.lower(), max(int(count), 1))
        dictionary._available = True
        return dictionary

    @property
    def word_count(self) -> int:
        return len(self._sym_spell.words)

    def add_word(self, word: str, frequency: int = 1000000):
        """
        Add a word to the dictionary.

        Args:
            word: Word to add
            frequency: Word frequency (higher = more likely suggestion)
        """
        word = word.strip().lower()
        if word:
            self._custom_words.add(word)
            self._sym_spell.create_dictionary_entry(word, frequency)

    def load_word_list(self, path: Path) -> int:
        """Load a custom word list (one word per line, '#' comments)."""
        added = 0
        with open(path, 'r', encoding='utf-8') as f:
            for line in f:
                word = line.strip()
                if word and not word.startswith('#'):
                    self.add_word(word)
                    added += 1
        return added

    def _known(self, word: str) -> bool:
        return word in self._sym_spell.words or word in self._custom_words

    def is_correct(self, word: str) -> bool:
        """
        Check if a word is known (case-insensitive).

        English contractions and possessives count as known when the
        stem is known.
        """
        word = _APOSTROPHES.sub("'", word).lower()
        if self._known(word):
            return True

        if "'" not in word:
            return False

        if self.language == 'en':
            if word in _IRREGULAR_CONTRACTIONS:
                return True
            for suffix in _CONTRACTION_SUFFIXES:
                if word.endswith(suffix) and len(word) > len(suffix):
                    return self._known(word[:-len(suffix)])

        return self._known(word.strip("'"))

    def suggest(self, word: str, limit: int = 5) -> List[str]:
        """
        Suggest replacements for a word, best first.

        Suggestions are ordered by edit distance then frequency, and keep
        the capitalisation of the input.
        """
        if not word:
            return []

        lookups = self._sym_spell.lookup(
            word.lower(),
            Verbosity.CLOSEST,
            max_edit_distance=self.max_edit_distance
        )

        results = []
        for suggestion in lookups:
            if suggestion.distance == 0:
                continue
            results.append(preserve_case(word, suggestion.term))
            if len(results) >= limit:
                break

        return results

    def get_status(self) -> Dict[str, Any]:
        """Get detailed status of the dictionary."""
        return {
            'available': self.is_available,
            'error': self._error,
            'language': self.language,
            'max_edit_distance': self.max_edit_distance,
            'dictionary_size': self.word_count,
            'custom_words_count': len(self._custom_words),
        }


def _english_frequency_path() -> Path:
    return Path(str(resources.files("symspellpy") / SpellingDictionary.FREQUENCY_DICT))


def _pyspellchecker_frequencies(language: str) -> Iterable[Tuple[str, int]]:
    from spellchecker import SpellChecker

    checker = SpellChecker(language=language)
    return checker.word_frequency.items()


def load_dictionary(
    language: str,
    max_edit_distance: int = 2,
    prefix_length: int = 7,
    custom_dictionary: Optional[str] = None
) -> SpellingDictionary:
    """
    Load the spelling dictionary for a language.

    Raises:
        DictionaryError: If no word list can be loaded for the language
    """
    dictionary = SpellingDictionary(
        language,
        max_edit_distance=max_edit_distance,
        prefix_length=prefix_length
    )

    try:
        if language == 'en':
            path = _english_frequency_path()
            if not dictionary._sym_spell.load_dictionary(str(path), term_index=0, count_index=1):
                raise DictionaryError(f"Frequency dictionary not found: {path}", language=language)
        else:
            for word, count in _pyspellchecker_frequencies(language):
                dictionary._sym_spell.create_dictionary_entry(word.lower(), max(int(count), 1))
    except DictionaryError:
        raise
    except (OSError, ValueError) as e:
        raise DictionaryError(f"Failed to load {language} dictionary: {e}", language=language) from e

    if dictionary.word_count == 0:
        raise DictionaryError(f"Empty dictionary for language: {language}", language=language)

    if custom_dictionary:
        path = Path(custom_dictionary)
        if path.exists():
            added = dictionary.load_word_list(path)
            logger.info("Loaded custom words", language=language, count=added)
        else:
            logger.warning("Custom dictionary not found", path=str(path))

    dictionary._available = True
    logger.info("Dictionary loaded", language=language, words=dictionary.word_count)
    return dictionary
