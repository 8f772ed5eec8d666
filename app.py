#!/usr/bin/env python3
"""
WriteRight HTTP Service - Main Flask Application
================================================
JSON API over the analysis core.

Endpoints:
- POST  /api/analyze-text          - Analyze text, filtered by user settings
- POST  /api/autocomplete          - Remote completions for partial text
- GET   /api/settings              - Current user settings
- PATCH /api/settings              - Partial settings update
- POST  /api/log-correction        - Record an accepted/dismissed correction
- GET   /api/corrections/recent    - Most recent logged corrections
- GET   /api/diagnostics/errors    - Per-service failure report
- POST  /api/diagnostics/reset-errors - Clear all failure counts
- POST  /api/cache/clear           - Drop cached analysis results
- GET   /api/status                - Component health
"""

import time
from functools import wraps
from typing import Optional

from flask import Blueprint, Flask, g, jsonify, request

from config_logging import (
    APP_NAME, VERSION, StructuredLogger, ValidationError, WriteRightError,
    get_config, get_logger, handle_errors
)
from writeright.analyzer import TextAnalyzer
from writeright.settings import CorrectionLog, SettingsStore, apply_preferences

logger = get_logger('app')

SLOW_REQUEST_SECONDS = 5.0


def handle_api_errors(f):
    """Render WriteRightError subclasses as JSON with their status code."""
    guarded = handle_errors(logger)(f)

    @wraps(f)
    def decorated(*args, **kwargs):
        start_time = time.time()
        try:
            result = guarded(*args, **kwargs)

            elapsed = time.time() - start_time
            if elapsed > SLOW_REQUEST_SECONDS:
                logger.warning(f"Slow API call: {f.__name__} took {elapsed:.1f}s")

            return result

        except WriteRightError as e:
            logger.warning(f"{e.code} in {f.__name__}: {e.message}")
            body = e.to_dict()
            body['error']['correlation_id'] = getattr(g, 'correlation_id', 'unknown')
            return jsonify(body), e.status_code

    return decorated


def _request_json() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_api_blueprint(analyzer: TextAnalyzer, settings_store: SettingsStore,
                         correction_log: CorrectionLog) -> Blueprint:
    """Build the /api blueprint bound to one set of components."""
    api = Blueprint('api', __name__, url_prefix='/api')

    @api.before_request
    def assign_correlation_id():
        g.correlation_id = StructuredLogger.new_correlation_id()

    @api.route('/analyze-text', methods=['POST'])
    @handle_api_errors
    def analyze_text():
        """Analyze text and return corrections plus autocomplete."""
        text = _request_json().get('text')
        if not isinstance(text, str) or not text:
            raise ValidationError("Text is required", field='text')

        result = analyzer.analyze(text)
        return jsonify(apply_preferences(result, settings_store.get()).to_dict())

    @api.route('/autocomplete', methods=['POST'])
    @handle_api_errors
    def autocomplete():
        """Ask the remote model for completions of partial text."""
        text = _request_json().get('text')
        if not isinstance(text, str) or not text:
            raise ValidationError("Text is required", field='text')

        try:
            suggestions = analyzer.remote.get_autocomplete_suggestions(text)
        except WriteRightError as e:
            logger.error(f"Autocomplete failed: {e.message}")
            return jsonify({'message': 'Failed to get suggestions'}), 500

        return jsonify({'suggestions': suggestions})

    @api.route('/settings', methods=['GET'])
    @handle_api_errors
    def get_settings():
        return jsonify(settings_store.get().to_dict())

    @api.route('/settings', methods=['PATCH'])
    @handle_api_errors
    def update_settings():
        """Apply a partial settings update; unknown keys are rejected."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Settings update must be a JSON object")
        return jsonify(settings_store.update(data).to_dict())

    @api.route('/log-correction', methods=['POST'])
    @handle_api_errors
    def log_correction():
        entry = correction_log.record(_request_json())
        return jsonify({'success': True, 'id': entry.id})

    @api.route('/corrections/recent', methods=['GET'])
    @handle_api_errors
    def recent_corrections():
        limit = request.args.get('limit', 10, type=int)
        return jsonify([entry.to_dict() for entry in correction_log.recent(limit)])

    @api.route('/diagnostics/errors', methods=['GET'])
    @handle_api_errors
    def error_report():
        return jsonify({'success': True, 'data': analyzer.get_error_report()})

    @api.route('/diagnostics/reset-errors', methods=['POST'])
    @handle_api_errors
    def reset_errors():
        analyzer.reset_all_error_counts()
        return jsonify({'success': True})

    @api.route('/cache/clear', methods=['POST'])
    @handle_api_errors
    def clear_cache():
        analyzer.clear_cache()
        return jsonify({'success': True})

    @api.route('/status', methods=['GET'])
    @handle_api_errors
    def status():
        return jsonify({
            'success': True,
            'app': APP_NAME,
            'version': VERSION,
            'data': analyzer.get_status(),
        })

    return api


def create_app(analyzer: Optional[TextAnalyzer] = None,
               settings_store: Optional[SettingsStore] = None,
               correction_log: Optional[CorrectionLog] = None) -> Flask:
    """
    Create the Flask application.

    The analyzer and the settings endpoints share one SettingsStore so a
    PATCH takes effect on the next analysis.
    """
    if analyzer is None:
        analyzer = TextAnalyzer(settings=settings_store)
    if settings_store is None:
        settings_store = analyzer.settings
    if correction_log is None:
        correction_log = CorrectionLog()

    app = Flask(__name__)
    app.extensions['writeright'] = {
        'analyzer': analyzer,
        'settings': settings_store,
        'corrections': correction_log,
    }
    app.register_blueprint(create_api_blueprint(analyzer, settings_store, correction_log))
    return app


def main():
    """Run the development server."""
    config = get_config()
    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        raise SystemExit(1)

    app = create_app()
    logger.info(f"{APP_NAME} {VERSION} starting", host=config.host, port=config.port)
    try:
        app.run(host=config.host, port=config.port, debug=config.debug, threaded=True)
    finally:
        app.extensions['writeright']['analyzer'].shutdown()


if __name__ == '__main__':
    main()
