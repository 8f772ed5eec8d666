"""
Spelling for WriteRight
=======================
Provides the dictionary-backed offline engine and the quick online pass.

Features:
- SymSpell: frequency-ranked suggestions per language
- pyspellchecker word lists for languages other than English
- Quick word-list pass for the online path

Requires: pip install symspellpy pyspellchecker
"""

__version__ = "1.0.0"

from .engine import OfflineAnalyzer
from .quick import QuickSpellChecker
from .symspell import SpellingDictionary, load_dictionary, preserve_case

__all__ = [
    'OfflineAnalyzer',
    'QuickSpellChecker',
    'SpellingDictionary',
    'load_dictionary',
    'preserve_case',
]
