"""
Grammar Checks for WriteRight
=============================
Lightweight regex rules for the offline path. Deeper grammar correction
is left to the remote model.
"""

__version__ = "1.0.0"

from .rules import GRAMMAR_RULES, GrammarIssue, GrammarRule, check_grammar, context_around

__all__ = ['GRAMMAR_RULES', 'GrammarIssue', 'GrammarRule', 'check_grammar', 'context_around']
