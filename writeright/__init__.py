"""
WriteRight Analysis Package
===========================
Version: 1.0.0

Spelling, grammar and autocomplete analysis with two paths:
- Online: OpenAI chat completions plus a quick local spelling pass
- Offline: SymSpell dictionaries and pattern grammar rules

The orchestrator caches results, tracks per-service failures, falls back
to the offline path when the remote service degrades, and probes for
recovery in the background.
Uses lazy loading - submodules only import when accessed.
"""

__version__ = "1.0.0"
__author__ = "WriteRight"

_MODULES = {
    'language': 'writeright.language',
    'spelling': 'writeright.spelling',
    'grammar': 'writeright.grammar',
    'remote': 'writeright.remote',
    'cache': 'writeright.cache',
    'failures': 'writeright.failures',
    'analyzer': 'writeright.analyzer',
    'settings': 'writeright.settings',
}

_loaded_modules = {}


def __getattr__(name):
    """Lazy load submodules on first access."""
    if name in _MODULES:
        if name not in _loaded_modules:
            import importlib
            _loaded_modules[name] = importlib.import_module(_MODULES[name])
        return _loaded_modules[name]
    raise AttributeError(f"module 'writeright' has no attribute '{name}'")


def __dir__():
    """List available submodules."""
    return list(_MODULES.keys()) + ['config', 'base', 'create_analyzer', 'get_status']


def create_analyzer(settings=None, **components):
    """
    Build a fully wired TextAnalyzer.

    Args:
        settings: SettingsStore to read preferences from
        **components: Any TextAnalyzer collaborator to override
            (cache, tracker, offline, remote, quick_speller, detector)
    """
    from .analyzer import TextAnalyzer
    return TextAnalyzer(settings=settings, **components)


def get_status():
    """
    Get versions of the analysis submodules.

    Returns dict with availability and version info for each module.
    """
    status = {
        'version': __version__,
        'modules': {}
    }

    for name in _MODULES:
        module_status = {'available': False, 'version': None, 'error': None}
        try:
            mod = __getattr__(name)
            module_status['available'] = True
            module_status['version'] = getattr(mod, '__version__', 'unknown')
        except ImportError as e:
            module_status['error'] = str(e)
        status['modules'][name] = module_status

    return status
