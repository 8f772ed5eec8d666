"""
Language Detection for WriteRight
=================================
Heuristic detection of en/es/fr/de text and mapping onto the languages
that have spelling dictionaries.
"""

from .detector import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    UNKNOWN,
    LanguageDetector,
    detect_language,
    map_to_supported_language,
)

__version__ = "1.0.0"

__all__ = [
    'DEFAULT_LANGUAGE',
    'SUPPORTED_LANGUAGES',
    'UNKNOWN',
    'LanguageDetector',
    'detect_language',
    'map_to_supported_language',
]
