"""Tests for the build-step plugin hook."""

import re

import pytest

from attrstrip import ConfigurationError, InvalidRuleKind, remove_attributes
from attrstrip.plugin import PLUGIN_NAME, RemoveAttributesPlugin

from .conftest import fixture_modal, load_fixture

COMPONENT = """
const Component = () => (
  <div data-testid="test" className="container" aria-label="Test">
    <span id="example">Hello World</span>
  </div>
);
"""


class TestPluginCreation:
    """Tests for remove_attributes."""

    def test_plugin_name(self):
        """Test the plugin name."""
        plugin = remove_attributes()
        assert plugin.name == PLUGIN_NAME == "remove-attributes"
        assert isinstance(plugin, RemoveAttributesPlugin)

    def test_production_by_default(self):
        """Test that the plugin is enabled by default."""
        plugin = remove_attributes(None)
        assert plugin.enabled
        assert plugin.matcher is not None
        assert plugin.filter is not None

    def test_invalid_options(self):
        """Test that bad options raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            remove_attributes("invalid")  # type: ignore[arg-type]

    def test_invalid_mode(self):
        """Test that an unknown mode is rejected."""
        with pytest.raises(ConfigurationError):
            remove_attributes({"mode": "staging"})

    def test_invalid_rule_kind(self):
        """Test that bad rules are rejected at creation."""
        with pytest.raises(InvalidRuleKind):
            remove_attributes({"attributes": [42]})


class TestDevelopmentMode:
    """Tests for the development no-op."""

    def test_development_mode_is_noop(self):
        """Test that development mode leaves code alone."""
        plugin = remove_attributes({"attributes": ["data-testid"], "mode": "development"})
        assert not plugin.enabled
        assert plugin.transform(COMPONENT, "test.tsx") is None

    def test_development_mode_never_compiles_rules(self):
        """Test that development mode skips rule compilation."""
        plugin = remove_attributes({"attributes": [42], "mode": "development"})
        assert plugin.matcher is None
        assert plugin.transform(COMPONENT, "test.tsx") is None


class TestTransform:
    """Tests for RemoveAttributesPlugin.transform."""

    def test_remove_attributes(self):
        """Test removing configured attributes."""
        plugin = remove_attributes({"attributes": ["data-testid", "aria-label"], "mode": "production"})

        result = plugin.transform(COMPONENT, "test.tsx")

        assert result is not None
        assert "data-testid" not in result.code
        assert "aria-label" not in result.code
        assert 'className="container"' in result.code
        assert 'id="example"' in result.code
        assert result.removed == 2

    def test_source_map_always_produced(self):
        """Test that changed modules always get a map."""
        plugin = remove_attributes({"attributes": "data-testid"})
        result = plugin.transform(COMPONENT, "/src/test.tsx")
        assert result is not None
        assert result.map is not None
        assert result.map.sources == ["/src/test.tsx"]

    def test_non_matching_file(self):
        """Test that files outside include are skipped."""
        plugin = remove_attributes({"attributes": ["data-testid"], "include": ["**/*.tsx"]})
        assert plugin.transform("const x = 1;", "test.js") is None

    def test_excluded_file(self):
        """Test that excluded files are skipped."""
        plugin = remove_attributes(
            {"attributes": ["data-testid"], "exclude": [re.compile(r"\.stories\.tsx$")]}
        )
        assert plugin.transform(COMPONENT, "/src/Button.stories.tsx") is None
        assert plugin.transform(COMPONENT, "/src/Button.tsx") is not None

    def test_no_attributes_removed(self):
        """Test that unchanged modules return None."""
        plugin = remove_attributes({"attributes": ["data-testid"]})
        code = '<div className="container"><span id="example">Hello World</span></div>'
        assert plugin.transform(code, "test.tsx") is None

    def test_invalid_code(self):
        """Test that unparsable modules return None."""
        plugin = remove_attributes({"attributes": ["data-testid"]})
        assert plugin.transform("invalid javascript code {{{", "test.tsx") is None

    @pytest.mark.parametrize("module_id", ["/src/util.ts", "/src/util.mts", "/src/util.cts?v=1"])
    def test_clean_typescript_module(self, module_id):
        """Test that plain TypeScript modules return None."""
        plugin = remove_attributes({"attributes": ["data-testid"]})
        assert plugin.transform("export const n: number = 1;\n", module_id) is None

    def test_typescript_type_assertion(self):
        """Test that angle-bracket casts in .ts modules return None."""
        plugin = remove_attributes({"attributes": ["data-testid"]})
        assert plugin.transform("const n = <number>value;\n", "/src/cast.ts") is None

    def test_no_attributes_configured(self):
        """Test that an empty rule set returns None."""
        plugin = remove_attributes()
        assert plugin.transform(COMPONENT, "test.tsx") is None

    def test_fixture_component(self):
        """Test the modal fixture."""
        plugin = remove_attributes({"attributes": [re.compile(r"^data-test")]})
        result = plugin.transform(load_fixture(fixture_modal), "/src/modal.jsx")
        assert result is not None
        assert "data-test" not in result.code
        assert "accessibility-test" in result.code
