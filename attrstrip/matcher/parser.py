"""Parser for textual attribute rules and YAML configuration files."""

import re
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .models import ExactRule, PatternRule, Rule


class RuleParseError(Exception):
    """Raised when a rule or configuration file cannot be parsed."""

    pass


# Flags that change matching; g, y and u only matter for stateful JS regexes
_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}
_IGNORED_FLAGS = set("gyu")

_CONFIG_KEYS = ("attributes", "include", "exclude", "mode")


def _parse_flags(flags_str: str) -> int:
    """Parse regex literal flags into re flags."""
    flags = 0
    for flag in flags_str:
        if flag in _REGEX_FLAGS:
            flags |= _REGEX_FLAGS[flag]
        elif flag not in _IGNORED_FLAGS:
            valid = "".join(sorted([*_REGEX_FLAGS, *_IGNORED_FLAGS]))
            raise RuleParseError(f"Invalid regex flag '{flag}'. Valid flags: {valid}")
    return flags


def _compile_checked(source: str, flags: int) -> PatternRule:
    try:
        re.compile(source, flags)
    except re.error as e:
        raise RuleParseError(f"Invalid regular expression '{source}': {e}") from e
    return PatternRule(source, flags)


def parse_rule(rule_string: str) -> Rule:
    """
    Parse a textual rule.

    Format:
        /source/flags   regular expression literal (flags: i, m, s; g, y, u ignored)
        re:source       regular expression without flags
        name            exact attribute name

    Examples:
        data-testid
        /^data-(test|cy)/i
        re:^aria-

    Raises:
        RuleParseError: If the rule string is empty or the pattern is invalid
    """
    rule_string = rule_string.strip()
    if not rule_string:
        raise RuleParseError("Empty rule string")

    if rule_string.startswith("re:"):
        source = rule_string[3:]
        if not source:
            raise RuleParseError("Missing pattern after 're:'")
        return _compile_checked(source, 0)

    if rule_string.startswith("/") and rule_string.count("/") >= 2:
        end = rule_string.rindex("/")
        if end > 0:
            source = rule_string[1:end]
            if not source:
                raise RuleParseError(f"Empty pattern in '{rule_string}'")
            return _compile_checked(source, _parse_flags(rule_string[end + 1 :]))

    return ExactRule(rule_string)


def parse_rules(rule_strings: list[str]) -> list[Rule]:
    """Parse a list of textual rules, reporting the offending entry on failure."""
    rules: list[Rule] = []
    for index, rule_string in enumerate(rule_strings, 1):
        if not isinstance(rule_string, str):
            raise RuleParseError(
                f"Rule #{index} must be a string, got {type(rule_string).__name__}"
            )
        try:
            rules.append(parse_rule(rule_string))
        except RuleParseError as e:
            raise RuleParseError(f"Error parsing rule #{index} '{rule_string}': {e}") from e
    return rules


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _load_yaml_file(file_path: Path) -> Any:
    """Load a YAML file."""
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RuleParseError(f"Invalid YAML: {e}")


def _validate_config_structure(data: Any) -> dict[str, Any]:
    """Validate the top level of a config file."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuleParseError("YAML file must contain a dictionary")

    unknown = sorted(set(data) - set(_CONFIG_KEYS))
    if unknown:
        raise RuleParseError(
            f"Unknown config key(s): {', '.join(unknown)}. Valid keys: {', '.join(_CONFIG_KEYS)}"
        )
    return data


def load_config_file(file_path: str | Path) -> dict[str, Any]:
    """
    Load plugin options from a YAML file.

    Example file:
        attributes:
          - data-testid
          - /^data-cy/i
        include: ["src/**/*.tsx"]
        exclude: ["**/*.stories.tsx"]
        mode: production

    Args:
        file_path: Path to the YAML file

    Returns:
        Options mapping suitable for validate_options, with attribute rules parsed

    Raises:
        RuleParseError: If the YAML or any rule is invalid
        FileNotFoundError: If the file doesn't exist
    """
    data = _validate_config_structure(_load_yaml_file(Path(file_path)))

    options: dict[str, Any] = dict(data)
    if "attributes" in options:
        options["attributes"] = parse_rules(_as_list(options["attributes"]))
    for key in ("include", "exclude"):
        if key in options:
            options[key] = [str(pattern) for pattern in _as_list(options[key])]
    return options
