"""Include/exclude filtering of module ids."""

import logging
import os
import re
from pathlib import Path
from typing import Any, Callable, Optional

from attrstrip.pipeline.parse import strip_module_suffix

logger = logging.getLogger(__name__)

PathMatcher = Callable[[str], bool]


def normalize_path(path: str) -> str:
    """Use forward slashes regardless of platform."""
    return path.replace("\\", "/")


def _translate_brace(pattern: str, index: int) -> tuple[str, int]:
    """Translate a {a,b} alternation starting at index."""
    end = pattern.find("}", index)
    if end == -1:
        return re.escape("{"), index + 1
    options = pattern[index + 1 : end].split(",")
    return "(?:" + "|".join(glob_to_regex(option, anchored=False) for option in options) + ")", end + 1


def _translate_class(pattern: str, index: int) -> tuple[str, int]:
    """Translate a [...] character class starting at index."""
    end = pattern.find("]", index + 1)
    if end == -1:
        return re.escape("["), index + 1
    body = pattern[index + 1 : end]
    if body.startswith("!"):
        body = "^" + body[1:]
    return "[" + body.replace("\\", "\\\\") + "]", end + 1


def glob_to_regex(pattern: str, anchored: bool = True) -> str:
    """
    Translate a glob pattern into a regular expression.

    ``**`` spans directories, ``*`` and ``?`` stay within one path segment,
    and ``{a,b}`` and ``[abc]`` behave as in shell globs. Dotfiles match.
    """
    parts: list[str] = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if pattern.startswith("**/", index):
            parts.append("(?:.*/)?")
            index += 3
        elif pattern.startswith("**", index):
            parts.append(".*")
            index += 2
        elif char == "*":
            parts.append("[^/]*")
            index += 1
        elif char == "?":
            parts.append("[^/]")
            index += 1
        elif char == "{":
            translated, index = _translate_brace(pattern, index)
            parts.append(translated)
        elif char == "[":
            translated, index = _translate_class(pattern, index)
            parts.append(translated)
        else:
            parts.append(re.escape(char))
            index += 1
    regex = "".join(parts)
    return f"^{regex}$" if anchored else regex


def _resolve_glob(pattern: str, base: str) -> str:
    """Resolve a relative glob against the base directory."""
    pattern = normalize_path(pattern)
    if pattern.startswith("**") or os.path.isabs(pattern) or pattern.startswith("/"):
        return pattern
    base = normalize_path(base).rstrip("/")
    if pattern.startswith("./"):
        pattern = pattern[2:]
    return f"{base}/{pattern}"


def _compile_matcher(pattern: Any, base: str) -> tuple[PathMatcher, bool]:
    """Compile one include/exclude pattern. Returns (matcher, is_glob)."""
    if isinstance(pattern, re.Pattern):
        compiled = re.compile(pattern.pattern, pattern.flags)
        return (lambda path_id: compiled.search(path_id) is not None), False
    if isinstance(pattern, (str, Path)):
        glob = re.compile(glob_to_regex(_resolve_glob(str(pattern), base)))
        return (lambda path_id: glob.match(path_id) is not None), True
    raise TypeError(f"Invalid path pattern type: {type(pattern).__name__}")


def _as_list(patterns: Any) -> list[Any]:
    if patterns is None:
        return []
    if isinstance(patterns, (list, tuple)):
        return list(patterns)
    return [patterns]


def create_filter(
    include: Any = None,
    exclude: Any = None,
    base: Optional[str] = None,
) -> Callable[[Any], bool]:
    """
    Build a predicate deciding whether a module id should be transformed.

    Args:
        include: Glob string, compiled regex or a list of them (empty = include all)
        exclude: Glob string, compiled regex or a list of them
        base: Directory that relative globs are resolved against (default: cwd)

    Returns:
        Callable returning True when the id is included and not excluded
    """
    resolution_base = base if base is not None else os.getcwd()
    include_matchers = [_compile_matcher(p, resolution_base) for p in _as_list(include)]
    exclude_matchers = [_compile_matcher(p, resolution_base) for p in _as_list(exclude)]

    def matches(matcher: tuple[PathMatcher, bool], path_id: str, file_path: str) -> bool:
        test, is_glob = matcher
        return test(file_path if is_glob else path_id)

    def filter_id(module_id: Any) -> bool:
        if not isinstance(module_id, str) or "\0" in module_id:
            return False

        path_id = normalize_path(module_id)
        file_path = strip_module_suffix(path_id)

        for matcher in exclude_matchers:
            if matches(matcher, path_id, file_path):
                logger.debug("Excluded %s", module_id)
                return False

        for matcher in include_matchers:
            if matches(matcher, path_id, file_path):
                return True

        return not include_matchers

    return filter_id
