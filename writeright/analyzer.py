"""
Text Analyzer for WriteRight
============================
Orchestrates one analysis call: cache lookup, language resolution,
online/offline selection, failure tracking, and fallback merging.

analyze(text) never raises for service trouble. Remote and dictionary
failures are recorded with the failure tracker and the caller receives
whatever could still be computed, possibly an empty result.

Online path:
    quick spelling pass (local) + remote grammar/autocomplete
    -> remote failing past threshold: offline path, merged with the
       spelling corrections already found
Offline path:
    dictionary spelling + pattern grammar + suffix autocomplete
"""

from typing import Any, Dict, List, Optional

from config_logging import ValidationError, get_logger
from .base import AnalysisRequest, AnalysisResult, Correction, CorrectionKind
from .cache import TextCache
from .failures import ErrorCategory, FailureTracker
from .language import LanguageDetector
from .remote import RemoteAnalysis, RemoteAnalysisClient
from .settings import SettingsStore
from .spelling import OfflineAnalyzer, QuickSpellChecker, load_dictionary
from . import config as wr_config

__version__ = "1.0.0"

logger = get_logger('analyzer')

MIN_ANALYSIS_LENGTH = 3


class TextAnalyzer:
    """
    Analysis entry point shared by the HTTP layer and library callers.

    Every collaborator can be injected; omitted ones are built from the
    analysis configuration.
    """

    def __init__(
        self,
        settings: Optional[SettingsStore] = None,
        cache: Optional[TextCache] = None,
        tracker: Optional[FailureTracker] = None,
        offline: Optional[OfflineAnalyzer] = None,
        remote: Optional[RemoteAnalysisClient] = None,
        quick_speller: Optional[QuickSpellChecker] = None,
        detector: Optional[LanguageDetector] = None
    ):
        cfg = wr_config.get_config()

        self.settings = settings if settings is not None else SettingsStore()
        self.cache = cache if cache is not None else TextCache(
            capacity=cfg.cache.capacity,
            min_length=cfg.cache.min_text_length
        )
        self.tracker = tracker if tracker is not None else FailureTracker(
            threshold=cfg.failures.threshold,
            recovery_interval=cfg.failures.recovery_interval
        )
        self.offline = offline if offline is not None else OfflineAnalyzer(
            loader=_configured_loader(cfg.spelling),
            max_suggestions=cfg.spelling.max_suggestions,
            context_chars=cfg.spelling.context_chars
        )
        self.remote = remote if remote is not None else RemoteAnalysisClient(
            api_key=cfg.remote.api_key,
            model=cfg.remote.model,
            timeout=cfg.remote.timeout,
            base_url=cfg.remote.base_url
        )
        self.quick_speller = quick_speller if quick_speller is not None else QuickSpellChecker()
        self.detector = detector if detector is not None else LanguageDetector(
            supported=cfg.language.supported,
            default=cfg.language.default,
            auto_detect_min_length=cfg.language.auto_detect_min_length
        )
        self.remote_min_length = cfg.remote.min_text_length

    # -------------------------------------------------------------------------
    # Analysis
    # -------------------------------------------------------------------------

    def analyze(self, text: str) -> AnalysisResult:
        """
        Analyze text using the current user settings.

        Args:
            text: Text to analyze

        Returns:
            AnalysisResult (empty for text under three characters)

        Raises:
            ValidationError: If text is not a string
        """
        settings = self.settings.get()
        return self.analyze_request(AnalysisRequest(
            text=text,
            language=settings.language,
            work_offline=settings.work_offline,
        ))

    def analyze_request(self, request: AnalysisRequest) -> AnalysisResult:
        """Run the pipeline with an explicit language and mode."""
        text = request.text
        if not isinstance(text, str):
            raise ValidationError("Text is required", field='text')

        if len(text) < MIN_ANALYSIS_LENGTH:
            return AnalysisResult.empty()

        cached = self.cache.get(text)
        if cached is not None:
            logger.debug("Using cached analysis result", text_length=len(text))
            return cached

        language = self.detector.resolve(text, request.language)

        if request.work_offline:
            logger.info("Using offline text analysis", language=language)
            result = self._analyze_offline(text, language)
        else:
            logger.info("Using online text analysis", language=language)
            result = self._analyze_online(text, language)

        self.cache.set(text, result)
        return result

    def _analyze_offline(self, text: str, language: str) -> AnalysisResult:
        try:
            result = self.offline.check(text, language)
        except Exception as e:
            if self.tracker.record_error(ErrorCategory.DICTIONARY, e):
                self.tracker.start_recovery_in_background(
                    ErrorCategory.DICTIONARY, self._dictionary_probe(language)
                )
            return AnalysisResult.empty()

        self.tracker.reset_error_count(ErrorCategory.DICTIONARY)
        return result

    def _analyze_online(self, text: str, language: str) -> AnalysisResult:
        if self.tracker.is_failing(ErrorCategory.API):
            logger.info("Remote service is failing, falling back to offline mode")
            self.tracker.start_recovery_in_background(ErrorCategory.API, self.remote.probe)
            return self._analyze_offline(text, language)

        corrections: List[Correction] = self.quick_speller.check(text)

        if len(text) <= self.remote_min_length:
            return AnalysisResult.build(corrections)

        try:
            analysis = self.remote.analyze_sentence(text)
        except Exception as e:
            if self.tracker.record_error(ErrorCategory.API, e):
                logger.info("Multiple remote failures detected, switching to offline mode")
                return AnalysisResult.build(corrections).merged_with(
                    self._analyze_offline(text, language)
                )
            return AnalysisResult.build(corrections)

        self.tracker.reset_error_count(ErrorCategory.API)
        corrections.extend(_remote_corrections(analysis))
        return AnalysisResult.build(corrections, analysis.autocomplete)

    def _dictionary_probe(self, language: str):
        def probe() -> bool:
            return self.offline.initialize(language)
        return probe

    # -------------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------------

    def clear_cache(self):
        self.cache.clear()
        logger.info("Analysis cache cleared")

    def reset_all_error_counts(self):
        self.tracker.reset_all_error_counts()
        logger.info("Error counts reset")

    def get_error_report(self) -> Dict[str, Dict[str, Any]]:
        return self.tracker.get_error_report()

    def get_status(self) -> Dict[str, Any]:
        """Health of every component, for diagnostics."""
        return {
            'cache': self.cache.stats(),
            'services': {
                category.value: self.tracker.health(category).value
                for category in ErrorCategory
            },
            'remote': self.remote.get_status(),
            'offline': self.offline.get_status(),
            'settings': self.settings.get().to_dict(),
        }

    def shutdown(self):
        """Stop pending recovery retries."""
        self.tracker.shutdown()


def _remote_corrections(analysis: RemoteAnalysis) -> List[Correction]:
    return [
        Correction(
            word=item.incorrect,
            suggestions=(item.correct,),
            kind=CorrectionKind.GRAMMAR,
            context=item.context,
        )
        for item in analysis.grammar
    ]


def _configured_loader(spelling: 'wr_config.SpellingConfig'):
    def loader(language: str):
        return load_dictionary(
            language,
            max_edit_distance=spelling.max_edit_distance,
            prefix_length=spelling.prefix_length,
            custom_dictionary=spelling.custom_dictionary
        )
    return loader
