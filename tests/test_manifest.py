import json

from build_tagger.manifest import TagManifest
from build_tagger.planner import TagPlan
from build_tagger.tagging.registry import Variant


def test_manifest_save(tmp_path):
    manifest = TagManifest(tmp_path / "dist")
    manifest.add_plan(
        TagPlan(
            service="worker",
            variant=Variant.STANDARD,
            reference="nginx",
            candidates=("nginx",),
            explicit=True,
        )
    )
    manifest.add_plan(
        TagPlan(
            service="api",
            variant=Variant.WITH_EXTRA_VOLUME_MOUNTS,
            reference="okteto.dev/movies-api:okteto-with-volume-mounts",
            candidates=(
                "okteto.global/movies-api:okteto-with-volume-mounts",
                "okteto.dev/movies-api:okteto-with-volume-mounts",
            ),
        ),
        cache_hit="okteto.dev/movies-api:okteto-with-volume-mounts",
    )

    path = manifest.save()

    assert path == tmp_path / "dist" / "tag_manifest.json"
    data = json.loads(path.read_text())
    assert [image["service"] for image in data["images"]] == ["api", "worker"]
    assert data["images"][0] == {
        "service": "api",
        "variant": "okteto-with-volume-mounts",
        "reference": "okteto.dev/movies-api:okteto-with-volume-mounts",
        "candidates": [
            "okteto.global/movies-api:okteto-with-volume-mounts",
            "okteto.dev/movies-api:okteto-with-volume-mounts",
        ],
        "explicit": False,
        "cache_hit": "okteto.dev/movies-api:okteto-with-volume-mounts",
    }
    assert data["images"][1]["explicit"] is True
    assert data["images"][1]["cache_hit"] is None
