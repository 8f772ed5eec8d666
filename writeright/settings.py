"""
User Settings for WriteRight
============================
Closed settings record, an in-memory settings store, result filtering by
preference, and the recent-corrections log.

Settings travel over HTTP with camelCase keys:
    workOffline, language, spellingCheck, grammarCheck, autocomplete
Unknown keys and wrongly typed values are rejected, never ignored.
"""

import threading
import time
from collections import deque
from dataclasses import dataclass, fields, replace
from typing import Any, Deque, Dict, List, Mapping, Optional

from config_logging import ValidationError, get_logger
from .base import AnalysisResult, CorrectionKind

__version__ = "1.0.0"

logger = get_logger('settings')


@dataclass(frozen=True)
class UserSettings:
    """Preferences consulted on every analysis call."""
    work_offline: bool = False
    language: str = "en-US"
    spelling_check: bool = True
    grammar_check: bool = True
    autocomplete: bool = True

    # wire name -> attribute name
    WIRE_NAMES = {
        'workOffline': 'work_offline',
        'language': 'language',
        'spellingCheck': 'spelling_check',
        'grammarCheck': 'grammar_check',
        'autocomplete': 'autocomplete',
    }

    @classmethod
    def _coerce(cls, data: Mapping[str, Any]) -> Dict[str, Any]:
        if not isinstance(data, Mapping):
            raise ValidationError("Settings must be an object")

        types = {f.name: f.type for f in fields(cls)}
        values: Dict[str, Any] = {}

        for key, value in data.items():
            attr = cls.WIRE_NAMES.get(key)
            if attr is None:
                raise ValidationError(f"Unknown setting: {key}", field=key)

            expected = bool if types[attr] in (bool, 'bool') else str
            if not isinstance(value, expected):
                raise ValidationError(
                    f"Setting {key} must be a {expected.__name__}", field=key
                )
            if attr == 'language' and not value.strip():
                raise ValidationError("Setting language must not be empty", field=key)

            values[attr] = value

        return values

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'UserSettings':
        """Build settings from wire-format data (missing keys keep defaults)."""
        return cls(**cls._coerce(data))

    def with_updates(self, data: Mapping[str, Any]) -> 'UserSettings':
        """Return a copy with wire-format updates applied."""
        return replace(self, **self._coerce(data))

    def to_dict(self) -> Dict[str, Any]:
        return {wire: getattr(self, attr) for wire, attr in self.WIRE_NAMES.items()}


class SettingsStore:
    """Thread-safe in-memory holder for the current user settings."""

    def __init__(self, initial: Optional[UserSettings] = None):
        self._settings = initial or UserSettings()
        self._lock = threading.Lock()

    def get(self) -> UserSettings:
        with self._lock:
            return self._settings

    def update(self, data: Mapping[str, Any]) -> UserSettings:
        """
        Apply a partial wire-format update.

        Raises:
            ValidationError: On an unknown key or wrong value type
        """
        with self._lock:
            self._settings = self._settings.with_updates(data)
            settings = self._settings

        logger.info("Settings updated", keys=sorted(data))
        return settings

    def reset(self) -> UserSettings:
        with self._lock:
            self._settings = UserSettings()
            return self._settings


def apply_preferences(result: AnalysisResult, settings: UserSettings) -> AnalysisResult:
    """Drop correction kinds and autocomplete the user has switched off."""
    enabled = set()
    if settings.spelling_check:
        enabled.add(CorrectionKind.SPELLING)
    if settings.grammar_check:
        enabled.add(CorrectionKind.GRAMMAR)

    return AnalysisResult.build(
        (c for c in result.corrections if c.kind in enabled),
        result.autocomplete_suggestions if settings.autocomplete else (),
    )


# =============================================================================
# CORRECTION LOG
# =============================================================================

CORRECTION_TYPES = ('spelling', 'grammar', 'autocomplete')


@dataclass(frozen=True)
class LoggedCorrection:
    """A correction the user accepted or dismissed."""
    id: int
    type: str
    original: str
    replacement: str
    application: str
    accepted: bool
    created_at: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type,
            'original': self.original,
            'replacement': self.replacement,
            'application': self.application,
            'accepted': self.accepted,
            'createdAt': self.created_at,
        }


class CorrectionLog:
    """Bounded in-memory history of corrections, newest last."""

    def __init__(self, max_entries: int = 500):
        self._entries: Deque[LoggedCorrection] = deque(maxlen=max_entries)
        self._next_id = 1
        self._lock = threading.Lock()

    def record(self, data: Mapping[str, Any]) -> LoggedCorrection:
        """
        Record a correction from wire-format data.

        Required: type, original. Optional: replacement, application, accepted.

        Raises:
            ValidationError: On a missing or malformed field
        """
        if not isinstance(data, Mapping):
            raise ValidationError("Correction must be an object")

        kind = data.get('type')
        if kind not in CORRECTION_TYPES:
            raise ValidationError(f"Correction type must be one of {', '.join(CORRECTION_TYPES)}",
                                  field='type')

        original = data.get('original')
        if not isinstance(original, str) or not original:
            raise ValidationError("Correction original text is required", field='original')

        for key in ('replacement', 'application'):
            if key in data and not isinstance(data[key], str):
                raise ValidationError(f"Correction {key} must be a string", field=key)

        accepted = data.get('accepted', True)
        if not isinstance(accepted, bool):
            raise ValidationError("Correction accepted must be a boolean", field='accepted')

        with self._lock:
            entry = LoggedCorrection(
                id=self._next_id,
                type=kind,
                original=original,
                replacement=data.get('replacement', ''),
                application=data.get('application', ''),
                accepted=accepted,
                created_at=time.time(),
            )
            self._next_id += 1
            self._entries.append(entry)
        return entry

    def recent(self, limit: int = 10) -> List[LoggedCorrection]:
        """Most recent corrections first."""
        with self._lock:
            entries = list(self._entries)
        if limit <= 0:
            return []
        return entries[::-1][:limit]

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
