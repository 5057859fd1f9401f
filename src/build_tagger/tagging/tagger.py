"""Image tagging policy for inferred and explicit build images."""

from __future__ import annotations

from typing import List

from ..config import BuildInfo, RuntimeContext
from .registry import Registry, Variant, format_reference

# Probe order for candidate lists: the shared registry is the most likely to
# already hold an equivalent image.
CANDIDATE_REGISTRIES = (Registry.GLOBAL, Registry.DEV)


class ImageTagger:
    """
    Resolves the reference an image is pushed to and the references a build
    cache should probe for it.

    A tagger is bound to one Variant and one RuntimeContext. Both are
    immutable, so a tagger can be shared freely between threads.
    """

    def __init__(self, context: RuntimeContext, variant: Variant = Variant.STANDARD):
        self.context = context
        self.variant = variant

    def tag(self, owner: str, service: str, build_info: BuildInfo) -> str:
        """
        Returns the reference the image for `service` is pushed to.

        An explicit image is returned unchanged. Otherwise a clean project with
        global access pushes to the global registry under the content-hash tag,
        and anything else pushes to the dev registry under the variant tag.
        """
        if build_info.image:
            return build_info.image

        if self.context.is_clean and self.context.has_access:
            return format_reference(
                Registry.GLOBAL,
                owner,
                service,
                self.variant.hash_tag(self.context.content_hash),
            )

        return format_reference(Registry.DEV, owner, service, self.variant.value)

    def get_possible_hash_images(
        self, owner: str, service: str, content_hash: str
    ) -> List[str]:
        """Returns the content-addressed references, global first. Empty without a hash."""
        if not content_hash:
            return []

        tag = self.variant.hash_tag(content_hash)
        return [
            format_reference(registry, owner, service, tag)
            for registry in CANDIDATE_REGISTRIES
        ]

    def get_possible_tags(self, owner: str, service: str, content_hash: str) -> List[str]:
        """
        Returns every reference this tagger could have produced for `service`,
        most specific first: the content-addressed references followed by the
        variant-only references.
        """
        variant_images = [
            format_reference(registry, owner, service, self.variant.value)
            for registry in CANDIDATE_REGISTRIES
        ]
        return self.get_possible_hash_images(owner, service, content_hash) + variant_images


def new_image_tagger(context: RuntimeContext) -> ImageTagger:
    return ImageTagger(context, Variant.STANDARD)


def new_image_with_volumes_tagger(context: RuntimeContext) -> ImageTagger:
    return ImageTagger(context, Variant.WITH_EXTRA_VOLUME_MOUNTS)
