"""Registry namespaces and tag literals used when naming inferred images."""

from __future__ import annotations

from enum import Enum


class Registry(str, Enum):
    """Registries an inferred image can be pushed to."""

    DEV = "okteto.dev"
    """Per-developer namespace. Always writable by the caller."""

    GLOBAL = "okteto.global"
    """Shared namespace. Requires global registry access."""


class Variant(str, Enum):
    """Build variants. The value is the base tag literal of the variant."""

    STANDARD = "okteto"
    WITH_EXTRA_VOLUME_MOUNTS = "okteto-with-volume-mounts"

    def hash_tag(self, content_hash: str) -> str:
        """
        Returns the tag literal keyed by a content hash.

        The standard variant uses the bare hash; other variants join their
        literal and the hash with a dash. Without a hash the base literal is
        returned.
        """
        if not content_hash:
            return self.value
        if self is Variant.STANDARD:
            return content_hash
        return f"{self.value}-{content_hash}"


def format_reference(registry: Registry, owner: str, service: str, tag: str) -> str:
    """Formats '<registry>/<owner>-<service>:<tag>'. Names are used verbatim."""
    return f"{registry.value}/{owner}-{service}:{tag}"
