"""
WriteRight Base Types
=====================
Data model shared by both analysis paths, the cache, and the HTTP layer,
plus the common interface for wrapped third-party integrations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

__version__ = "1.0.0"


class CorrectionKind(Enum):
    """What kind of problem a correction flags."""
    SPELLING = "spelling"
    GRAMMAR = "grammar"


@dataclass(frozen=True)
class Correction:
    """
    A flagged span of text with ranked replacement suggestions.

    Produced by either analysis path. Suggestions are ordered best-first.
    """
    word: str
    suggestions: Tuple[str, ...]
    kind: CorrectionKind
    context: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire format used by API responses."""
        return {
            'word': self.word,
            'suggestions': list(self.suggestions),
            'type': self.kind.value,
            'context': self.context,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Correction':
        return cls(
            word=data.get('word', ''),
            suggestions=tuple(data.get('suggestions') or ()),
            kind=CorrectionKind(data.get('type', CorrectionKind.SPELLING.value)),
            context=data.get('context', ''),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """
    Unit returned by the analyzer and stored in the cache.

    An empty result is the valid "nothing found" value; a cache miss is
    represented by None, never by an empty result.
    """
    corrections: Tuple[Correction, ...] = ()
    autocomplete_suggestions: Tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> 'AnalysisResult':
        return cls()

    @classmethod
    def build(cls, corrections: Iterable[Correction] = (),
              autocomplete_suggestions: Iterable[str] = ()) -> 'AnalysisResult':
        return cls(tuple(corrections), tuple(autocomplete_suggestions))

    @property
    def is_empty(self) -> bool:
        return not self.corrections and not self.autocomplete_suggestions

    def merged_with(self, other: 'AnalysisResult') -> 'AnalysisResult':
        """Union of corrections (ours first) with the other result's autocomplete."""
        return AnalysisResult(
            corrections=self.corrections + other.corrections,
            autocomplete_suggestions=other.autocomplete_suggestions,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'corrections': [c.to_dict() for c in self.corrections],
            'autocompleteSuggestions': list(self.autocomplete_suggestions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnalysisResult':
        return cls.build(
            (Correction.from_dict(c) for c in data.get('corrections') or ()),
            data.get('autocompleteSuggestions') or (),
        )


@dataclass(frozen=True)
class AnalysisRequest:
    """Input to one analysis call; lives only for the duration of that call."""
    text: str
    language: str = "auto"
    work_offline: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)


class IntegrationBase(ABC):
    """
    Abstract base class for wrapped third-party integrations.

    Wraps external libraries (SymSpell dictionaries, the OpenAI SDK).
    """

    INTEGRATION_NAME: str = "Integration"
    INTEGRATION_VERSION: str = "1.0.0"

    def __init__(self):
        self._available = False
        self._error: Optional[str] = None

    @property
    def is_available(self) -> bool:
        """Check if the integration is available and working."""
        return self._available

    @property
    def error(self) -> Optional[str]:
        """Get initialization error if any."""
        return self._error

    @abstractmethod
    def get_status(self) -> Dict[str, Any]:
        """Get detailed status of the integration."""
        pass
