"""
Language Detection for WriteRight
=================================
Heuristic language identification from distinctive characters and
common function words.

Detection order:
1. Language-specific accented characters (first match wins)
2. Common-word scoring over whitespace tokens
3. Low-signal text falls back to the default language, not 'unknown'
"""

import re
from typing import Dict, FrozenSet, List, Optional, Pattern, Sequence, Tuple

from config_logging import get_logger

__version__ = "1.0.0"

logger = get_logger('language')

UNKNOWN = "unknown"
DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES: Tuple[str, ...] = ("en", "es")

MIN_DETECTION_LENGTH = 5
MIN_TOKENS = 5
MIN_SCORE = 2

# Scoring order doubles as the tie-break order
COMMON_WORDS: Dict[str, FrozenSet[str]] = {
    'en': frozenset({
        'the', 'be', 'to', 'of', 'and', 'a', 'in', 'that', 'have', 'it',
        'for', 'not', 'on', 'with', 'he', 'as', 'you', 'do', 'at', 'this',
        'but', 'his', 'by', 'from', 'they', 'we', 'say', 'her', 'she', 'or',
        'an', 'will', 'my', 'one', 'all', 'would', 'there', 'their', 'what', 'so',
    }),
    'es': frozenset({
        'el', 'la', 'de', 'que', 'y', 'a', 'en', 'un', 'ser', 'se',
        'no', 'haber', 'por', 'con', 'su', 'para', 'como', 'estar', 'tener', 'le',
        'lo', 'todo', 'pero', 'más', 'hacer', 'o', 'poder', 'decir', 'este', 'ir',
        'otro', 'ese', 'si', 'me', 'ya', 'ver', 'porque', 'dar', 'cuando', 'muy',
    }),
    'fr': frozenset({
        'le', 'la', 'de', 'et', 'à', 'en', 'un', 'être', 'avoir', 'que',
        'pour', 'dans', 'ce', 'il', 'qui', 'ne', 'sur', 'se', 'pas', 'plus',
        'par', 'je', 'avec', 'tout', 'faire', 'son', 'mettre', 'autre', 'on', 'mais',
        'nous', 'comme', 'ou', 'si', 'leur', 'y', 'dire', 'elle', 'devoir', 'avant',
    }),
    'de': frozenset({
        'der', 'die', 'und', 'in', 'den', 'von', 'zu', 'das', 'mit', 'sich',
        'des', 'auf', 'für', 'ist', 'im', 'dem', 'nicht', 'ein', 'eine', 'als',
        'auch', 'es', 'an', 'werden', 'aus', 'er', 'hat', 'dass', 'sie', 'nach',
        'bei', 'um', 'am', 'sind', 'noch', 'wie', 'einem', 'über', 'einen', 'wenn',
    }),
}

# Checked in order; Spanish accents are tested before the French set that overlaps it
SPECIAL_PATTERNS: List[Tuple[str, Pattern]] = [
    ('es', re.compile(r'[áéíóúñü]', re.IGNORECASE)),
    ('fr', re.compile(r'[àâçéèêëîïôùûüÿ]', re.IGNORECASE)),
    ('de', re.compile(r'[äöüß]', re.IGNORECASE)),
]

_NON_LETTERS = re.compile(r'[\W\d_]+')


def _clean_token(token: str) -> str:
    return _NON_LETTERS.sub('', token)


def detect_language(text: Optional[str]) -> str:
    """
    Detect the language of a given text.

    Args:
        text: The text to analyze

    Returns:
        Language code ('en', 'es', 'fr', 'de') or 'unknown' for short input
    """
    if not text or len(text) < MIN_DETECTION_LENGTH:
        return UNKNOWN

    normalized = text.lower()

    for lang, pattern in SPECIAL_PATTERNS:
        if pattern.search(normalized):
            return lang

    tokens = normalized.split()
    scores = {lang: 0 for lang in COMMON_WORDS}

    for token in tokens:
        word = _clean_token(token)
        if len(word) < 2:
            continue
        for lang, words in COMMON_WORDS.items():
            if word in words:
                scores[lang] += 1

    best_language = UNKNOWN
    best_score = 0
    for lang, score in scores.items():
        if score > best_score:
            best_language, best_score = lang, score

    if len(tokens) >= MIN_TOKENS and best_score >= MIN_SCORE:
        return best_language

    # Not enough signal: assume the default language rather than 'unknown'
    return DEFAULT_LANGUAGE


def map_to_supported_language(
    language: Optional[str],
    supported: Sequence[str] = SUPPORTED_LANGUAGES,
    default: str = DEFAULT_LANGUAGE
) -> str:
    """
    Map a language code to one that has a dictionary.

    'en-US' -> 'en', 'es_MX' -> 'es', unsupported -> default.
    """
    if not language:
        return default

    if language in supported:
        return language

    base = re.split(r'[-_]', language.strip(), maxsplit=1)[0].lower()
    if base in supported:
        return base

    return default


class LanguageDetector:
    """Injectable wrapper around detection and supported-language mapping."""

    def __init__(
        self,
        supported: Sequence[str] = SUPPORTED_LANGUAGES,
        default: str = DEFAULT_LANGUAGE,
        auto_detect_min_length: int = 10
    ):
        self.supported = tuple(supported)
        self.default = default
        self.auto_detect_min_length = auto_detect_min_length

    def detect(self, text: str) -> str:
        return detect_language(text)

    def map_to_supported(self, language: Optional[str]) -> str:
        return map_to_supported_language(language, self.supported, self.default)

    def resolve(self, text: str, preference: Optional[str]) -> str:
        """
        Resolve the effective dictionary language for a text.

        'auto' runs detection only when the text is long enough to carry
        signal; otherwise the preference is mapped directly.
        """
        if preference == 'auto' and len(text) > self.auto_detect_min_length:
            detected = self.detect(text)
            language = self.map_to_supported(detected)
            logger.debug("Auto-detected language", detected=detected, language=language)
            return language
        return self.map_to_supported(preference)
