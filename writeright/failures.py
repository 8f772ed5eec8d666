"""
Failure Tracking for WriteRight
===============================
Per-category error counts, degradation thresholds and recovery probes.

A category is failing once its error count reaches the threshold. While
failing, recovery probes run at most one at a time per category; a failed
probe schedules another attempt after ``recovery_interval`` seconds until
a probe succeeds, the count is reset, or the tracker is shut down.
"""

import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from config_logging import DegradedServiceError, get_logger

__version__ = "1.0.0"

logger = get_logger('failures')

DEFAULT_THRESHOLD = 5
DEFAULT_RECOVERY_INTERVAL = 60.0

RecoveryProbe = Callable[[], bool]


class ErrorCategory(Enum):
    """Service categories whose failures are tracked separately."""
    NETWORK = "network"
    API = "api"
    DATABASE = "database"
    DICTIONARY = "dictionary"
    MEMORY = "memory"
    UNKNOWN = "unknown"

    @classmethod
    def classify(cls, value: Union['ErrorCategory', str, None]) -> 'ErrorCategory':
        """Map a category or its string value onto a category; unknown -> UNKNOWN."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.UNKNOWN


class ServiceHealth(Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    RECOVERING = "recovering"


@dataclass
class ServiceFailureState:
    """Mutable failure record for one category."""
    error_count: int = 0
    last_error_time: Optional[float] = None
    recovery_attempts: int = 0
    is_recovering: bool = False
    last_error: Optional[str] = None


class FailureTracker:
    """
    Thread-safe failure counts with background recovery.

    Example:
        tracker = FailureTracker(threshold=5)
        if tracker.record_error(ErrorCategory.API, exc):
            tracker.start_recovery_in_background(ErrorCategory.API, client.probe)
    """

    def __init__(
        self,
        threshold: int = DEFAULT_THRESHOLD,
        recovery_interval: float = DEFAULT_RECOVERY_INTERVAL,
        clock: Callable[[], float] = time.time
    ):
        if threshold < 1:
            raise ValueError(f"Failure threshold must be positive: {threshold}")

        self.threshold = threshold
        self.recovery_interval = recovery_interval
        self._clock = clock

        self._states: Dict[ErrorCategory, ServiceFailureState] = {
            category: ServiceFailureState() for category in ErrorCategory
        }
        self._timers: Dict[ErrorCategory, threading.Timer] = {}
        self._lock = threading.Lock()
        self._closed = False

    def record_error(self, category: Union[ErrorCategory, str],
                     error: Union[BaseException, str, None] = None) -> bool:
        """
        Record one failure.

        Returns:
            True when the category has reached the threshold
        """
        category = ErrorCategory.classify(category)
        message = str(error) if error is not None else None

        with self._lock:
            state = self._states[category]
            state.error_count += 1
            state.last_error_time = self._clock()
            state.last_error = message
            count = state.error_count

        logger.warning(f"{category.value} error recorded", category=category.value,
                       error_count=count, reason=message)
        return count >= self.threshold

    def is_failing(self, category: Union[ErrorCategory, str]) -> bool:
        category = ErrorCategory.classify(category)
        with self._lock:
            return self._states[category].error_count >= self.threshold

    def health(self, category: Union[ErrorCategory, str]) -> ServiceHealth:
        category = ErrorCategory.classify(category)
        with self._lock:
            state = self._states[category]
            if state.is_recovering:
                return ServiceHealth.RECOVERING
            if state.error_count >= self.threshold:
                return ServiceHealth.DEGRADED
            return ServiceHealth.HEALTHY

    def get_state(self, category: Union[ErrorCategory, str]) -> ServiceFailureState:
        """Snapshot copy of a category's state."""
        category = ErrorCategory.classify(category)
        with self._lock:
            return replace(self._states[category])

    def degraded_error(self, category: Union[ErrorCategory, str]) -> DegradedServiceError:
        """Describe a failing category as an error object for diagnostics."""
        category = ErrorCategory.classify(category)
        return DegradedServiceError(category.value, self.get_state(category).error_count)

    def start_recovery(self, category: Union[ErrorCategory, str],
                       probe: RecoveryProbe) -> Optional[bool]:
        """
        Run a recovery probe for a category.

        Returns:
            None if a probe for this category is already in flight,
            otherwise whether the probe succeeded
        """
        category = ErrorCategory.classify(category)

        with self._lock:
            state = self._states[category]
            if state.is_recovering or self._closed:
                return None
            state.is_recovering = True
            state.recovery_attempts += 1
            attempt = state.recovery_attempts

        logger.info(f"Attempting recovery for {category.value} service",
                    category=category.value, attempt=attempt)

        success = False
        try:
            success = bool(probe())
        except Exception as e:
            logger.warning(f"Recovery probe raised for {category.value} service",
                           category=category.value, reason=str(e))

        with self._lock:
            state = self._states[category]
            state.is_recovering = False
            if success:
                state.error_count = 0
            still_failing = state.error_count >= self.threshold

        if success:
            logger.info(f"Recovery successful for {category.value} service",
                        category=category.value)
        else:
            logger.warning(f"Recovery failed for {category.value} service",
                           category=category.value, attempt=attempt)

        if still_failing:
            self._schedule_retry(category, probe)

        return success

    def start_recovery_in_background(self, category: Union[ErrorCategory, str],
                                     probe: RecoveryProbe) -> Optional[threading.Thread]:
        """Run start_recovery on a daemon thread unless one is already in flight."""
        category = ErrorCategory.classify(category)
        with self._lock:
            if self._states[category].is_recovering or self._closed:
                return None

        thread = threading.Thread(
            target=self.start_recovery,
            args=(category, probe),
            name=f"recovery-{category.value}",
            daemon=True,
        )
        thread.start()
        return thread

    def _schedule_retry(self, category: ErrorCategory, probe: RecoveryProbe):
        with self._lock:
            if self._closed:
                return
            pending = self._timers.get(category)
            if pending is not None and pending.is_alive():
                return
            timer = threading.Timer(self.recovery_interval, self._retry, args=(category, probe))
            timer.daemon = True
            self._timers[category] = timer
            timer.start()

        logger.debug("Recovery rescheduled", category=category.value,
                     delay_seconds=self.recovery_interval)

    def _retry(self, category: ErrorCategory, probe: RecoveryProbe):
        with self._lock:
            self._timers.pop(category, None)
            if self._states[category].error_count < self.threshold:
                return
        self.start_recovery(category, probe)

    def reset_error_count(self, category: Union[ErrorCategory, str]):
        """Clear the error count and recovery attempts for a category."""
        category = ErrorCategory.classify(category)
        with self._lock:
            state = self._states[category]
            state.error_count = 0
            state.recovery_attempts = 0

    def reset_all_error_counts(self):
        for category in ErrorCategory:
            self.reset_error_count(category)

    def get_error_report(self) -> Dict[str, Dict[str, Any]]:
        """JSON-ready summary of every category."""
        report = {}
        with self._lock:
            for category, state in self._states.items():
                report[category.value] = {
                    'count': state.error_count,
                    'last_occurred': state.last_error_time,
                    'recovery_attempts': state.recovery_attempts,
                    'is_recovering': state.is_recovering,
                    'failing': state.error_count >= self.threshold,
                    'last_error': state.last_error,
                }
        return report

    def shutdown(self):
        """Cancel pending recovery retries and refuse new ones."""
        with self._lock:
            self._closed = True
            timers = list(self._timers.values())
            self._timers.clear()

        for timer in timers:
            timer.cancel()
