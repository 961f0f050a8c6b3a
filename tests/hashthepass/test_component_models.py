"""
Tests for the component.json model.
"""

import json

import pytest

from hashthepass.component_models import Manifest
from hashthepass.hashthepass_exceptions import ManifestError


class TestManifest:
    """Tests for Manifest."""

    @pytest.fixture
    def dialog_manifest(self):
        """A typical component.json."""
        return {
            "name": "dialog",
            "description": "Dialog component",
            "scripts": ["index.js", "lib/util.js"],
            "styles": ["dialog.css"],
            "templates": ["dialog.html", "index.js"],
            "dependencies": {"component/emitter": "*", "component/overlay": "0.1.0"},
        }

    def test_files_order_and_duplicates(self, dialog_manifest):
        """Test that files are scripts, styles, templates with duplicates kept."""
        manifest = Manifest(**dialog_manifest)
        assert manifest.files() == [
            "index.js",
            "lib/util.js",
            "dialog.css",
            "dialog.html",
            "index.js",
        ]

    def test_missing_lists_default_to_empty(self):
        """Test that a manifest without file lists has no files."""
        manifest = Manifest.from_json('{"name": "empty"}')
        assert manifest.files() == []
        assert not manifest.has_dependencies()

    def test_unknown_keys_preserved(self, dialog_manifest):
        """Test that keys outside the model survive a round trip."""
        manifest = Manifest.from_json(json.dumps(dialog_manifest))
        assert json.loads(manifest.to_json())["description"] == "Dialog component"

    def test_to_json_only_present_keys(self):
        """Test that defaults are not written back, but an assigned repo is."""
        manifest = Manifest.from_json('{"scripts": ["index.js"]}')
        manifest.repo = "https://github.com/component/dialog"

        assert json.loads(manifest.to_json()) == {
            "scripts": ["index.js"],
            "repo": "https://github.com/component/dialog",
        }

    def test_to_json_pretty_printed(self):
        """Test the two-space indentation."""
        manifest = Manifest.from_json('{"name": "dialog"}')
        assert manifest.to_json() == '{\n  "name": "dialog"\n}'

    def test_null_lists_treated_as_empty(self):
        """Test that null file lists and dependencies mean none."""
        manifest = Manifest.from_json(
            '{"scripts": ["index.js"], "styles": null, "templates": null, "dependencies": null}'
        )

        assert manifest.files() == ["index.js"]
        assert not manifest.has_dependencies()
        assert set(manifest.to_dict()) == {"scripts", "styles", "templates", "dependencies"}

    @pytest.mark.parametrize(
        "text",
        ["not json", "[1, 2]", '{"scripts": "index.js"}', '{"dependencies": ["a/b"]}'],
    )
    def test_invalid_manifest(self, text):
        """Test that unparsable or malformed manifests raise ManifestError."""
        with pytest.raises(ManifestError):
            Manifest.from_json(text)
