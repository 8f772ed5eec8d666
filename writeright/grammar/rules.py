"""
Pattern Grammar Rules for WriteRight
====================================
Regex grammar checks used by the offline analysis path.

Rules are case-insensitive and applied in order. Two rules carry an
automatic fix (subject-verb agreement, a/an); homophone rules only flag
the match so the user can double-check it.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern

__version__ = "1.0.0"

CONTEXT_CHARS = 20


@dataclass(frozen=True)
class GrammarIssue:
    """A grammar problem found by a pattern rule."""
    incorrect: str
    correct: str
    context: str
    rule_id: str


def _fix_agreement(match: str) -> str:
    return re.sub(r'was', 'were', match, count=1, flags=re.IGNORECASE)


def _fix_article(match: str) -> str:
    return re.sub(r'\b(a) ', lambda m: m.group(1) + 'n ', match, count=1, flags=re.IGNORECASE)


@dataclass(frozen=True)
class GrammarRule:
    """A single pattern rule; ``fix`` maps the matched text to its correction."""
    rule_id: str
    issue: str
    pattern: Pattern
    exclude: Optional[Pattern] = None
    fix: Optional[Callable[[str], str]] = None

    def suggestion_for(self, match: str) -> str:
        if self.fix is None:
            return match
        return self.fix(match)


def _rule(rule_id: str, issue: str, pattern: str, exclude: Optional[str] = None,
          fix: Optional[Callable[[str], str]] = None) -> GrammarRule:
    return GrammarRule(
        rule_id=rule_id,
        issue=issue,
        pattern=re.compile(pattern, re.IGNORECASE),
        exclude=re.compile(exclude, re.IGNORECASE) if exclude else None,
        fix=fix,
    )


GRAMMAR_RULES: List[GrammarRule] = [
    _rule('AGREEMENT', 'subject-verb agreement',
          r'\b(?:i|we|they|you|he|she) was\b',
          exclude=r'\b(?:he|she) was\b', fix=_fix_agreement),
    _rule('ARTICLE', 'a/an', r'\b(?:a) (?:[aeiou]\w+)', fix=_fix_article),
    _rule('HOMOPHONE_THEIR', 'homophones', r"\b(?:their|there|they're)\b"),
    _rule('HOMOPHONE_YOUR', 'homophones', r"\b(?:your|you're)\b"),
    _rule('HOMOPHONE_ITS', 'homophones', r"\b(?:its|it's)\b"),
    _rule('HOMOPHONE_AFFECT', 'homophones', r'\b(?:affect|effect)\b'),
    _rule('HOMOPHONE_TO', 'homophones', r'\b(?:to|too|two)\b'),
]


def context_around(text: str, start: int, end: int, chars: int = CONTEXT_CHARS) -> str:
    """Slice of ``text`` with up to ``chars`` characters either side of a span."""
    return text[max(0, start - chars):min(len(text), end + chars)]


def check_grammar(text: str, rules: Optional[List[GrammarRule]] = None) -> List[GrammarIssue]:
    """
    Run the pattern rules over text.

    Args:
        text: Text to check
        rules: Rules to apply (default: GRAMMAR_RULES)

    Returns:
        Issues in rule order, then match order
    """
    issues = []

    for rule in rules if rules is not None else GRAMMAR_RULES:
        for match in rule.pattern.finditer(text):
            matched = match.group(0)
            if rule.exclude and rule.exclude.search(matched):
                continue

            issues.append(GrammarIssue(
                incorrect=matched,
                correct=rule.suggestion_for(matched),
                context=context_around(text, match.start(), match.end()),
                rule_id=rule.rule_id,
            ))

    return issues
