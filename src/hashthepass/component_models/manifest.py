"""
Pydantic data model for component.json.

A manifest lists the files a component ships and the components it depends
on. Fields this model does not know about are kept so that the manifest
written to disk matches the one that was fetched.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from hashthepass.hashthepass_exceptions import ManifestError

MANIFEST_FILE = "component.json"

# Dependency version meaning "the default branch"
WILDCARD_VERSION = "*"


class Manifest(BaseModel):
    """
    A component.json.

    Structure:
    {
      "name": "...",
      "repo": "owner/repo",
      "scripts": ["index.js", ...],
      "styles": ["dialog.css", ...],
      "templates": ["dialog.html", ...],
      "dependencies": {"owner/repo": "version or *", ...}
    }
    """

    name: Optional[str] = Field(None, description="Component name")
    repo: Optional[str] = Field(None, description="Repository URL")
    scripts: List[str] = Field(default_factory=list)
    styles: List[str] = Field(default_factory=list)
    templates: List[str] = Field(default_factory=list)
    dependencies: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    @field_validator("scripts", "styles", "templates", mode="before")
    @classmethod
    def coerce_null_lists(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("dependencies", mode="before")
    @classmethod
    def coerce_null_dependencies(cls, v: Any) -> Any:
        return {} if v is None else v

    @classmethod
    def from_json(cls, text: str, source: str = MANIFEST_FILE) -> "Manifest":
        """
        Parse a manifest from its JSON text.

        Args:
            text: The JSON body
            source: Where the text came from, used in error messages

        Raises:
            ManifestError: If the text is not JSON or not a valid manifest
        """
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ManifestError(f"invalid JSON in {source}: {e}") from e

        if not isinstance(data, dict):
            raise ManifestError(f"{source} must contain a JSON object")

        try:
            return cls(**data)
        except ValidationError as e:
            raise ManifestError(f"invalid manifest {source}: {e}") from e

    def files(self) -> List[str]:
        """Scripts, styles and templates, in that order."""
        return [*self.scripts, *self.styles, *self.templates]

    def has_dependencies(self) -> bool:
        return bool(self.dependencies)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert back to a dict holding only the keys that were set.
        """
        present = self.model_fields_set | set(self.model_extra or {})
        return {k: v for k, v in self.model_dump().items() if k in present}

    def to_json(self) -> str:
        """Pretty-printed JSON, as written to disk."""
        return json.dumps(self.to_dict(), indent=2)
