"""Build-step hook that strips configured JSX attributes from modules."""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

from attrstrip.config import PluginSettings, validate_options
from attrstrip.matcher import AttributeMatcher, create_attribute_matcher
from attrstrip.models import TransformOutput
from attrstrip.pipeline.filter import create_filter
from attrstrip.pipeline.transform import transform_code

logger = logging.getLogger(__name__)

PLUGIN_NAME = "remove-attributes"


class RemoveAttributesPlugin:
    """Per-module transform hook configured once per build."""

    name = PLUGIN_NAME

    def __init__(self, settings: PluginSettings):
        self.settings = settings
        self.filter: Optional[Callable[[Any], bool]] = None
        self.matcher: Optional[AttributeMatcher] = None

        if settings.enabled:
            self.filter = create_filter(settings.include, settings.exclude)
            self.matcher = create_attribute_matcher(settings.attributes)
        else:
            logger.info("Attribute removal disabled in %s mode", settings.mode)

    @property
    def enabled(self) -> bool:
        return self.settings.enabled

    def transform(self, code: Any, module_id: str) -> Optional[TransformOutput]:
        """
        Transform one module.

        Returns:
            None when the module is left untouched, otherwise the new code
            with its source map
        """
        if self.filter is None or self.matcher is None:
            return None

        if not self.filter(module_id):
            logger.debug("Skipping %s (filtered out)", module_id)
            return None

        result = transform_code(code, self.matcher, filename=module_id, source_map=True)

        if not result.parsed:
            logger.debug("Skipping %s (could not be parsed)", module_id)
            return None

        if not result.changed:
            return None

        logger.debug("Removed %d attribute(s) from %s", result.removed, module_id)
        return TransformOutput(code=result.code, map=result.map, removed=result.removed)


def remove_attributes(
    options: Mapping[str, Any] | PluginSettings | None = None,
) -> RemoveAttributesPlugin:
    """
    Create the attribute removal plugin.

    Args:
        options: Plugin options (attributes, include, exclude, mode)

    Raises:
        ConfigurationError: If the options are invalid
        InvalidRuleKind: If an attribute rule has an unsupported type
    """
    return RemoveAttributesPlugin(validate_options(options))
