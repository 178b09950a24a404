"""Strip JSX attributes such as data-testid from JavaScript and TypeScript sources."""

from attrstrip.config import ConfigurationError, PluginSettings, validate_options
from attrstrip.matcher import AttributeMatcher, InvalidRuleKind, create_attribute_matcher
from attrstrip.models import SourceMap, TransformOutput, TransformResult
from attrstrip.pipeline.transform import transform_code
from attrstrip.plugin import RemoveAttributesPlugin, remove_attributes

__all__ = [
    "AttributeMatcher",
    "ConfigurationError",
    "InvalidRuleKind",
    "PluginSettings",
    "RemoveAttributesPlugin",
    "SourceMap",
    "TransformOutput",
    "TransformResult",
    "create_attribute_matcher",
    "remove_attributes",
    "transform_code",
    "validate_options",
]
