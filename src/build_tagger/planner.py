"""The Planner transforms the project configuration into a list of TagPlans."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .config import BuildInfo, ProjectConfig, RuntimeContext
from .tagging.registry import Variant
from .tagging.tagger import ImageTagger, new_image_tagger, new_image_with_volumes_tagger


@dataclass(frozen=True)
class TagPlan:
    """
    The resolved naming for one service: where its image is pushed and which
    references a build cache should probe before building it.
    """

    service: str
    variant: Variant
    reference: str
    candidates: Tuple[str, ...]
    explicit: bool = False


class Planner:
    """Resolves push references and cache candidates for every service in a project."""

    def __init__(self, config: ProjectConfig, context: Optional[RuntimeContext] = None):
        self.config = config
        self.context = context if context is not None else config.runtime
        self._taggers: Dict[Variant, ImageTagger] = {
            Variant.STANDARD: new_image_tagger(self.context),
            Variant.WITH_EXTRA_VOLUME_MOUNTS: new_image_with_volumes_tagger(self.context),
        }

    def tagger_for(self, variant: Variant) -> ImageTagger:
        return self._taggers[variant]

    def plan(self) -> List[TagPlan]:
        """Returns one TagPlan per service, in declaration order."""
        return [
            self.plan_service(name, build_info)
            for name, build_info in self.config.build.items()
        ]

    def plan_service(self, service: str, build_info: BuildInfo) -> TagPlan:
        variant = (
            Variant.WITH_EXTRA_VOLUME_MOUNTS if build_info.volumes else Variant.STANDARD
        )
        tagger = self.tagger_for(variant)
        reference = tagger.tag(self.config.name, service, build_info)

        # An explicit image is the only reference this build can produce.
        if build_info.image:
            candidates: Tuple[str, ...] = (build_info.image,)
        else:
            candidates = tuple(
                tagger.get_possible_tags(
                    self.config.name, service, self.context.content_hash
                )
            )

        return TagPlan(
            service=service,
            variant=variant,
            reference=reference,
            candidates=candidates,
            explicit=bool(build_info.image),
        )
