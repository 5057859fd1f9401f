from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, List, Optional

from .planner import TagPlan


class TagManifest:
    """Records the resolved image references of a run."""

    def __init__(self, dist_path: Path):
        self.dist_path = dist_path
        self.images: List[Dict] = []
        self._lock = threading.Lock()

    def add_plan(self, plan: TagPlan, cache_hit: Optional[str] = None) -> None:
        with self._lock:
            self.images.append(
                {
                    "service": plan.service,
                    "variant": plan.variant.value,
                    "reference": plan.reference,
                    "candidates": list(plan.candidates),
                    "explicit": plan.explicit,
                    "cache_hit": cache_hit,
                }
            )

    def save(self) -> Path:
        self.dist_path.mkdir(parents=True, exist_ok=True)
        manifest_path = self.dist_path / "tag_manifest.json"
        with self._lock:
            images = sorted(self.images, key=lambda image: image["service"])
        with open(manifest_path, "w") as f:
            json.dump({"images": images}, f, indent=2)
        print(f"Manifest saved to: {manifest_path}")
        return manifest_path
