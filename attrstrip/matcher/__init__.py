"""Attribute rule matching."""

from .compiler import AttributeMatcher, compile_rules, create_attribute_matcher
from .models import (
    AttributeOption,
    ExactRule,
    InvalidRuleKind,
    PatternRule,
    PredicateRule,
    Rule,
    to_rule,
)
from .parser import RuleParseError, load_config_file, parse_rule, parse_rules

__all__ = [
    "AttributeMatcher",
    "AttributeOption",
    "ExactRule",
    "InvalidRuleKind",
    "PatternRule",
    "PredicateRule",
    "Rule",
    "RuleParseError",
    "compile_rules",
    "create_attribute_matcher",
    "load_config_file",
    "parse_rule",
    "parse_rules",
    "to_rule",
]
