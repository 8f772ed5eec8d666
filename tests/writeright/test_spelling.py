"""
Tests for Spelling
==================
Tests for the SymSpell dictionary wrapper, the offline engine and the
quick online spelling pass.
"""

import threading

import pytest

from config_logging import DictionaryError
from writeright.base import CorrectionKind
from writeright.spelling import (
    OfflineAnalyzer, QuickSpellChecker, SpellingDictionary, preserve_case
)

from .conftest import CountingLoader, ENGLISH_FREQUENCIES


class TestSpellingDictionary:
    """Tests for SpellingDictionary."""

    def test_known_word(self, english_dictionary):
        assert english_dictionary.is_correct("package")

    def test_membership_is_case_insensitive(self, english_dictionary):
        assert english_dictionary.is_correct("Package")
        assert english_dictionary.is_correct("HELLO")

    def test_unknown_word(self, english_dictionary):
        assert not english_dictionary.is_correct("teh")

    def test_contractions_with_known_stem(self, english_dictionary):
        assert english_dictionary.is_correct("don't")
        assert english_dictionary.is_correct("you're")
        assert english_dictionary.is_correct("can't")

    def test_possessive(self, english_dictionary):
        assert english_dictionary.is_correct("dog's")

    def test_contraction_with_unknown_stem(self, english_dictionary):
        assert not english_dictionary.is_correct("blorf's")

    def test_suggestions_best_first(self, english_dictionary):
        """Closest edit distance first, then higher frequency."""
        suggestions = english_dictionary.suggest("teh")
        assert suggestions[0] == "the"
        assert set(suggestions) <= {"the", "ten", "tea"}

    def test_suggestions_preserve_case(self, english_dictionary):
        assert english_dictionary.suggest("Teh")[0] == "The"

    def test_suggestion_limit(self, english_dictionary):
        assert len(english_dictionary.suggest("teh", limit=1)) == 1

    def test_no_suggestion_for_known_word(self, english_dictionary):
        assert english_dictionary.suggest("the") == []

    def test_add_word(self, english_dictionary):
        assert not english_dictionary.is_correct("symspell")
        english_dictionary.add_word("SymSpell")
        assert english_dictionary.is_correct("symspell")

    def test_load_word_list(self, english_dictionary, tmp_path):
        words = tmp_path / "words.txt"
        words.write_text("# product names\nwriteright\n\nflask\n", encoding='utf-8')
        assert english_dictionary.load_word_list(words) == 2
        assert english_dictionary.is_correct("WriteRight")

    def test_status(self, english_dictionary):
        status = english_dictionary.get_status()
        assert status['available'] is True
        assert status['language'] == 'en'
        assert status['dictionary_size'] == len(ENGLISH_FREQUENCIES)


class TestPreserveCase:

    @pytest.mark.parametrize("original,corrected,expected", [
        ("teh", "the", "the"),
        ("Teh", "the", "The"),
        ("TEH", "the", "THE"),
        ("I", "a", "A"),
    ])
    def test_preserve_case(self, original, corrected, expected):
        assert preserve_case(original, corrected) == expected


class TestOfflineAnalyzer:
    """Tests for OfflineAnalyzer."""

    def test_misspelling_reported(self, offline):
        result = offline.check("teh", 'en')
        assert len(result.corrections) == 1
        correction = result.corrections[0]
        assert correction.kind is CorrectionKind.SPELLING
        assert correction.word == "teh"
        assert correction.suggestions[0] == "the"

    def test_short_and_numeric_words_skipped(self, offline):
        result = offline.check("zz 4u abc123 hello", 'en')
        assert result.corrections == ()

    def test_word_reported_once(self, offline):
        result = offline.check("teh dog and teh fox", 'en')
        spelling = [c for c in result.corrections if c.kind is CorrectionKind.SPELLING]
        assert [c.word for c in spelling] == ["teh"]

    def test_spelling_context(self, offline):
        text = "I really want to receive teh package tomorrow morning"
        correction = [c for c in offline.check(text, 'en').corrections if c.word == "teh"][0]
        start = text.index("teh")
        assert correction.context == text[start - 20:start + 3 + 20]

    def test_grammar_corrections_follow_spelling(self, offline):
        result = offline.check("they was going to recieve it", 'en')
        kinds = [c.kind for c in result.corrections]
        assert kinds == [CorrectionKind.SPELLING, CorrectionKind.GRAMMAR, CorrectionKind.GRAMMAR]
        grammar = result.corrections[1]
        assert grammar.word == "they was"
        assert grammar.suggestions == ("they were",)

    def test_autocomplete_endings(self, offline):
        result = offline.check("hello world", 'en')
        assert result.autocomplete_suggestions == ("worlds", "worlding", "worlded", "worldly")

    def test_no_autocomplete_for_short_last_word(self, offline):
        assert offline.check("hello dog", 'en').autocomplete_suggestions == ()

    def test_no_autocomplete_after_trailing_punctuation(self, offline):
        assert offline.check("hello world.", 'en').autocomplete_suggestions == ()

    def test_dictionary_is_loaded_once(self, offline, loader):
        offline.check("hello world", 'en')
        offline.check("hello there", 'en')
        assert loader.calls == ['en']

    def test_initialize(self, offline):
        assert not offline.is_initialized('es')
        assert offline.initialize('es') is True
        assert offline.is_initialized('es')

    def test_check_raises_when_dictionary_unavailable(self, offline, loader):
        loader.failing = True
        with pytest.raises(DictionaryError):
            offline.check("hello world", 'en')

    def test_analyze_fails_closed(self, offline, loader):
        loader.failing = True
        result = offline.analyze("hello world", 'en')
        assert result.is_empty

    def test_failed_load_is_retried(self, offline, loader):
        loader.failing = True
        offline.analyze("hello world", 'en')
        assert not offline.is_initialized('en')

        loader.failing = False
        result = offline.analyze("teh", 'en')
        assert result.corrections[0].word == "teh"
        assert loader.calls == ['en', 'en']

    def test_concurrent_first_use_loads_once(self):
        """Concurrent callers for one language share a single load."""
        started = threading.Event()
        release = threading.Event()
        inner = CountingLoader()

        def slow_loader(language):
            started.set()
            release.wait(2.0)
            return inner(language)

        offline = OfflineAnalyzer(loader=slow_loader)
        results = []

        def worker():
            results.append(offline.get_dictionary('en'))

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        started.wait(2.0)
        release.set()
        for thread in threads:
            thread.join(2.0)

        assert inner.calls == ['en']
        assert len(results) == 5
        assert all(d is results[0] for d in results)


class TestQuickSpellChecker:
    """Tests for the online quick spelling pass."""

    def test_known_misspelling_with_table_suggestions(self):
        corrections = QuickSpellChecker().check("I saw teh cat")
        assert len(corrections) == 1
        assert corrections[0].word == "teh"
        assert corrections[0].suggestions == ("the", "then", "ten")
        assert corrections[0].kind is CorrectionKind.SPELLING

    def test_placeholder_suggestions(self):
        corrections = QuickSpellChecker().check("that is wierd")
        assert corrections[0].suggestions == ("example", "suggestion", "wierds")

    def test_unknown_words_are_accepted(self):
        assert QuickSpellChecker().check("Thank you for your con") == []

    def test_punctuation_stripped(self):
        corrections = QuickSpellChecker().check("Did you recieve, it?")
        assert corrections[0].word == "recieve"
        assert corrections[0].suggestions[0] == "receive"

    def test_context_is_five_words_each_side(self):
        text = "one two three four five six teh seven eight nine ten eleven twelve"
        correction = QuickSpellChecker().check(text)[0]
        assert correction.context == "two three four five six teh seven eight nine ten eleven"

    def test_case_insensitive(self):
        corrections = QuickSpellChecker().check("Teh end")
        assert corrections[0].word == "Teh"
