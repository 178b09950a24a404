"""Plugin configuration using pydantic-settings."""

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

Mode = Literal["development", "production"]
MODES: tuple[str, ...] = ("development", "production")


class ConfigurationError(ValueError):
    """Raised when plugin options are malformed."""

    pass


class PluginSettings(BaseSettings):
    """Settings for the attribute removal plugin."""

    model_config = SettingsConfigDict(
        env_prefix="ATTRSTRIP_",
        extra="forbid",
    )

    attributes: Any = Field(
        default_factory=list,
        description="Attribute rules: names, compiled patterns, predicates or a list of them",
    )
    include: Any = Field(
        default_factory=list,
        description="Glob strings or compiled patterns selecting files to transform (empty = all)",
    )
    exclude: Any = Field(
        default_factory=list,
        description="Glob strings or compiled patterns selecting files to skip",
    )
    mode: Mode = Field(
        default="production",
        description="'development' disables stripping, 'production' enables it",
    )

    @property
    def enabled(self) -> bool:
        return self.mode == "production"


def _raise_for_validation_error(error: ValidationError) -> None:
    for detail in error.errors():
        if detail["loc"] and detail["loc"][0] == "mode":
            raise ConfigurationError('Mode must be either "development" or "production"') from error
    messages = "; ".join(
        f"{'.'.join(str(part) for part in detail['loc'])}: {detail['msg']}" for detail in error.errors()
    )
    raise ConfigurationError(f"Invalid options: {messages}") from error


def validate_options(options: Mapping[str, Any] | PluginSettings | None = None) -> PluginSettings:
    """
    Validate plugin options and fill in defaults.

    Args:
        options: Options mapping, an existing PluginSettings or None for defaults

    Returns:
        Validated PluginSettings

    Raises:
        ConfigurationError: If options is not a mapping or holds invalid values
    """
    if options is None:
        options = {}
    if isinstance(options, PluginSettings):
        return options
    if not isinstance(options, Mapping):
        raise ConfigurationError("Options must be an object")

    # Explicit None means "use the default", as with a missing key
    values = {key: value for key, value in options.items() if value is not None}
    try:
        return PluginSettings(**values)
    except ValidationError as e:
        _raise_for_validation_error(e)
        raise


# Global settings instance that can be accessed throughout the application
_settings: PluginSettings | None = None


def get_settings() -> PluginSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = PluginSettings()
    return _settings


def set_settings(settings: PluginSettings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings
