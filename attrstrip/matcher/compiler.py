"""Compile attribute rule sets into a single decision function."""

import logging
import re
from typing import Callable, Sequence, Union

from .models import (
    AttributeOption,
    ExactRule,
    InvalidRuleKind,
    PatternRule,
    PredicateRule,
    Rule,
    to_rule,
)

logger = logging.getLogger(__name__)

RuleSet = Union[AttributeOption, Rule, Sequence[Union[AttributeOption, Rule]]]
Predicate = Callable[[str], bool]


def _never(name: str) -> bool:
    return False


def _compile_exact(rule: ExactRule) -> Predicate:
    expected = rule.name

    def matches(name: str) -> bool:
        return name == expected

    return matches


def _compile_pattern(rule: PatternRule) -> Predicate:
    # Recompiled from source and flags so the matcher never shares the caller's object
    compiled = re.compile(rule.source, rule.flags)

    def matches(name: str) -> bool:
        return compiled.search(name) is not None

    return matches


def _compile_rule(rule: Rule) -> Predicate:
    """Build the predicate for a single rule."""
    if isinstance(rule, ExactRule):
        return _compile_exact(rule)
    if isinstance(rule, PatternRule):
        return _compile_pattern(rule)
    if isinstance(rule, PredicateRule):
        return rule.predicate
    raise InvalidRuleKind(f"Invalid attribute option type: {type(rule).__name__}")


def _any_of(predicates: tuple[Predicate, ...]) -> Predicate:
    def matches(name: str) -> bool:
        for predicate in predicates:
            if predicate(name):
                return True
        return False

    return matches


def _normalize_rule_set(rules: object) -> list[Rule]:
    if isinstance(rules, (list, tuple)):
        return [to_rule(option) for option in rules]
    return [to_rule(rules)]


def compile_rules(rules: list[Rule]) -> Predicate:
    """Compile normalized rules into one predicate.

    Empty rule sets never match, a single rule is used directly and larger
    sets are OR-ed together in declaration order.
    """
    if not rules:
        return _never
    if len(rules) == 1:
        return _compile_rule(rules[0])
    return _any_of(tuple(_compile_rule(rule) for rule in rules))


class AttributeMatcher:
    """Decides whether an attribute name matches a configured rule set."""

    def __init__(self, rules: RuleSet):
        self._rules = tuple(_normalize_rule_set(rules))
        self._predicate = compile_rules(list(self._rules))
        logger.debug("Compiled attribute matcher with %d rule(s)", len(self._rules))

    @property
    def rules(self) -> tuple[Rule, ...]:
        """The normalized rules, in declaration order."""
        return self._rules

    def match_attribute(self, name: str) -> bool:
        """Return True if the attribute name should be removed."""
        return bool(self._predicate(name))

    def __call__(self, name: str) -> bool:
        return self.match_attribute(name)

    def __repr__(self) -> str:
        described = ", ".join(rule.describe() for rule in self._rules)
        return f"AttributeMatcher([{described}])"


def create_attribute_matcher(rules: RuleSet) -> AttributeMatcher:
    """
    Build a matcher from a rule set.

    Args:
        rules: A bare rule or a list of rules. A rule is an exact attribute
            name, a compiled regular expression or a predicate callable.

    Returns:
        An AttributeMatcher that can be shared across transforms

    Raises:
        InvalidRuleKind: If any rule has an unsupported type
    """
    return AttributeMatcher(rules)
