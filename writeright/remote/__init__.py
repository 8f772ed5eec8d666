"""
Remote Analysis for WriteRight
==============================
OpenAI chat-completions client for the online path.

Requires: pip install openai
"""

__version__ = "1.0.0"

from .client import (
    GrammarSuggestion,
    RemoteAnalysis,
    RemoteAnalysisClient,
    parse_analysis,
    parse_suggestions,
)

__all__ = [
    'GrammarSuggestion',
    'RemoteAnalysis',
    'RemoteAnalysisClient',
    'parse_analysis',
    'parse_suggestions',
]
