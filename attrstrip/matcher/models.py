"""Data models for attribute match rules."""

import re
from dataclasses import dataclass
from typing import Callable, Union

# Rule options as callers pass them in, normalized by to_rule
AttributeOption = Union[str, "re.Pattern[str]", Callable[[str], bool]]


class InvalidRuleKind(TypeError):
    """Raised when a rule is not a string, a compiled pattern or a callable."""

    pass


@dataclass(frozen=True)
class ExactRule:
    """Matches a single attribute name exactly (case-sensitive)."""

    name: str

    def describe(self) -> str:
        return f"exact '{self.name}'"


@dataclass(frozen=True)
class PatternRule:
    """Matches attribute names with a regular expression search."""

    source: str
    flags: int = 0

    def describe(self) -> str:
        flags = []
        if self.flags & re.IGNORECASE:
            flags.append("i")
        if self.flags & re.MULTILINE:
            flags.append("m")
        if self.flags & re.DOTALL:
            flags.append("s")
        return f"pattern /{self.source}/{''.join(flags)}"


@dataclass(frozen=True)
class PredicateRule:
    """Matches attribute names with an arbitrary callable."""

    predicate: Callable[[str], bool]

    def describe(self) -> str:
        name = getattr(self.predicate, "__name__", type(self.predicate).__name__)
        return f"predicate {name}"


Rule = Union[ExactRule, PatternRule, PredicateRule]


def to_rule(option: object) -> Rule:
    """Normalize a caller-supplied option into one of the rule variants.

    Raises:
        InvalidRuleKind: If the option has an unsupported type
    """
    if isinstance(option, (ExactRule, PatternRule, PredicateRule)):
        return option
    if isinstance(option, str):
        return ExactRule(option)
    if isinstance(option, re.Pattern):
        if not isinstance(option.pattern, str):
            raise InvalidRuleKind("Byte patterns cannot match attribute names")
        return PatternRule(option.pattern, option.flags)
    if callable(option):
        return PredicateRule(option)
    raise InvalidRuleKind(f"Invalid attribute option type: {type(option).__name__}")
