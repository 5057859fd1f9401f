"""Configuration schema for build-tagger using Pydantic."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONFIG = "build_tagger.yaml"


class RuntimeContext(BaseModel):
    """Facts about the environment a build runs in. Immutable once created."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    is_clean: bool = False
    """True if the source tree has no uncommitted changes relevant to the build."""

    has_access: bool = False
    """True if the caller may push to the global registry."""

    content_hash: str = ""
    """Opaque cache key for the build. Empty means no hash is available."""

    def override(
        self,
        is_clean: Optional[bool] = None,
        has_access: Optional[bool] = None,
        content_hash: Optional[str] = None,
    ) -> RuntimeContext:
        """Returns a new context with the given facts replaced. None keeps the current value."""
        updates = {
            key: value
            for key, value in (
                ("is_clean", is_clean),
                ("has_access", has_access),
                ("content_hash", content_hash),
            )
            if value is not None
        }
        return self.model_copy(update=updates)


class BuildInfo(BaseModel):
    """Build definition for a single service."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    image: Optional[str] = None
    """Explicit image reference. When unset the reference is inferred."""

    dockerfile: str = "Dockerfile"
    """Dockerfile path, relative to the context."""

    context: str = "."
    """Build context directory."""

    volumes: List[str] = Field(default_factory=list)
    """Paths mounted into the image at build time. Selects the volume-mounts variant."""


class ProjectConfig(BaseModel):
    """Root configuration object for a build-tagger project."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str
    """Owner name used as the first segment of inferred image names."""

    runtime: RuntimeContext = Field(default_factory=RuntimeContext)
    """Default runtime facts. CLI flags may override them."""

    build: Dict[str, BuildInfo] = Field(default_factory=dict)
    """Map of service names to their build definitions."""

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> ProjectConfig:
        """Loads and validates a ProjectConfig from a YAML file."""
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Config file not found: {path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML config: {str(e)}")
        return cls.model_validate(data or {})
