"""
Quick Spelling Pass for WriteRight
==================================
Small in-memory spelling check run locally alongside the remote call.

Only known misspellings are flagged; any other unknown word is treated
as correct so the online path never floods the user with false
positives. Full dictionary checking is the offline engine's job.
"""

import re
from typing import Dict, FrozenSet, List, Tuple

from ..base import Correction, CorrectionKind

__version__ = "1.0.0"

CONTEXT_WORDS = 5

COMMON_WORDS: FrozenSet[str] = frozenset({
    'the', 'be', 'to', 'of', 'and', 'a', 'in', 'that', 'have', 'i',
    'it', 'for', 'not', 'on', 'with', 'he', 'as', 'you', 'do', 'at',
    'this', 'but', 'his', 'by', 'from', 'they', 'we', 'say', 'her', 'she',
    'or', 'an', 'will', 'my', 'one', 'all', 'would', 'there', 'their', 'what',
    'so', 'up', 'out', 'if', 'about', 'who', 'get', 'which', 'go', 'me',
})

KNOWN_MISSPELLINGS: FrozenSet[str] = frozenset({
    'teh', 'taht', 'recieve', 'thier', 'accomodate', 'seperete',
    'definately', 'occured', 'untill', 'wierd', 'wich', 'ther',
})

SUGGESTIONS: Dict[str, Tuple[str, ...]] = {
    'teh': ('the', 'then', 'ten'),
    'taht': ('that', 'tag', 'taut'),
    'recieve': ('receive', 'relieve', 'reprieve'),
}

_PUNCTUATION = re.compile(r'[^\w]')


class QuickSpellChecker:
    """Conservative word-list speller for the online path."""

    def __init__(
        self,
        common_words: FrozenSet[str] = COMMON_WORDS,
        misspellings: FrozenSet[str] = KNOWN_MISSPELLINGS,
        suggestions: Dict[str, Tuple[str, ...]] = SUGGESTIONS
    ):
        self.common_words = common_words
        self.misspellings = misspellings
        self.suggestions = suggestions

    def is_correct(self, word: str) -> bool:
        if not word:
            return True
        lower = word.lower()
        if lower in self.common_words:
            return True
        return lower not in self.misspellings

    def suggest(self, word: str) -> List[str]:
        known = self.suggestions.get(word.lower())
        if known:
            return list(known)
        return ['example', 'suggestion', word + 's']

    def check(self, text: str) -> List[Correction]:
        """
        Flag known misspellings in text.

        Context is up to five words either side of the flagged token.
        """
        tokens = text.split()
        corrections = []

        for i, token in enumerate(tokens):
            word = _PUNCTUATION.sub('', token)
            if len(word) < 2 or self.is_correct(word):
                continue

            context = ' '.join(tokens[max(0, i - CONTEXT_WORDS):i + CONTEXT_WORDS + 1])
            corrections.append(Correction(
                word=word,
                suggestions=tuple(self.suggest(word)),
                kind=CorrectionKind.SPELLING,
                context=context,
            ))

        return corrections
