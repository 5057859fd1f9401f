"""Main CLI entry point for build-tagger."""

from __future__ import annotations

import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional

import click

from .cache.probe import DockerImageChecker, ImageCache
from .config import DEFAULT_CONFIG, ProjectConfig, RuntimeContext
from .manifest import TagManifest
from .planner import Planner, TagPlan
from .tagging.registry import Variant
from .tagging.tagger import ImageTagger


@click.group()
def cli():
    """Build Tagger: resolves image references and cache candidates for builds."""
    pass


def project_options(func):
    """Adds the project file option and the flags that override its runtime facts."""
    func = click.option(
        "--hash", "content_hash", type=str, default=None, help="Content hash of the build."
    )(func)
    func = click.option(
        "--global-access",
        "has_access",
        type=click.BOOL,
        default=None,
        help="Whether the caller may push to the global registry.",
    )(func)
    func = click.option(
        "--clean",
        "is_clean",
        type=click.BOOL,
        default=None,
        help="Whether the source tree has no uncommitted changes.",
    )(func)
    func = click.option(
        "--config",
        type=click.Path(exists=True, path_type=Path),
        default=Path(DEFAULT_CONFIG),
        help="Path to the project config YAML.",
    )(func)
    return func


def load_planner(
    config: Path,
    is_clean: Optional[bool],
    has_access: Optional[bool],
    content_hash: Optional[str],
) -> Planner:
    project = ProjectConfig.from_yaml(config)
    context = project.runtime.override(
        is_clean=is_clean, has_access=has_access, content_hash=content_hash
    )
    return Planner(project, context)


@cli.command()
@project_options
@click.option(
    "--dist",
    type=click.Path(path_type=Path),
    default=Path("dist"),
    help="Output directory for the tag manifest.",
)
def tag(
    config: Path,
    is_clean: Optional[bool],
    has_access: Optional[bool],
    content_hash: Optional[str],
    dist: Path,
):
    """Resolves the reference each service image is pushed to."""
    planner = load_planner(config, is_clean, has_access, content_hash)
    manifest = TagManifest(dist)

    for plan in planner.plan():
        click.echo(f"{plan.service}: {plan.reference}")
        manifest.add_plan(plan)

    manifest.save()


@cli.command()
@click.argument("owner")
@click.argument("service")
@click.option("--hash", "content_hash", type=str, default="", help="Content hash of the build.")
@click.option(
    "--with-volumes", is_flag=True, help="Use the tags of builds with extra volume mounts."
)
def candidates(owner: str, service: str, content_hash: str, with_volumes: bool):
    """Lists the references a build cache should probe, most specific first."""
    variant = Variant.WITH_EXTRA_VOLUME_MOUNTS if with_volumes else Variant.STANDARD
    tagger = ImageTagger(RuntimeContext(content_hash=content_hash), variant)
    for reference in tagger.get_possible_tags(owner, service, content_hash):
        click.echo(reference)


def probe_plan(plan: TagPlan, cache: ImageCache) -> Optional[str]:
    """Returns the first existing candidate of a plan, if any."""
    return cache.find(plan.candidates)


@cli.command()
@project_options
@click.option(
    "--dist",
    type=click.Path(path_type=Path),
    default=Path("dist"),
    help="Output directory for the tag manifest.",
)
@click.option("--local", is_flag=True, help="Probe the local Docker daemon instead of registries.")
@click.option(
    "-j", "--concurrency", type=int, default=1, help="Number of parallel probes."
)
def lookup(
    config: Path,
    is_clean: Optional[bool],
    has_access: Optional[bool],
    content_hash: Optional[str],
    dist: Path,
    local: bool,
    concurrency: int,
):
    """Checks which service images already exist and which need a build."""
    planner = load_planner(config, is_clean, has_access, content_hash)
    plans = planner.plan()
    manifest = TagManifest(dist)

    click.echo(f"Probing {len(plans)} services. Parallelism: {concurrency}")

    failed = False
    with DockerImageChecker(remote=not local) as checker:
        cache = ImageCache(checker)
        with ThreadPoolExecutor(max_workers=concurrency) as executor:
            futures = {executor.submit(probe_plan, plan, cache): plan for plan in plans}
            for future in as_completed(futures):
                plan = futures[future]
                try:
                    hit = future.result()
                except Exception as e:
                    click.echo(f"Lookup failed for {plan.service}: {e}", err=True)
                    failed = True
                    continue

                if hit:
                    click.echo(f"{plan.service}: cache hit {hit}")
                else:
                    click.echo(f"{plan.service}: build required -> {plan.reference}")
                manifest.add_plan(plan, cache_hit=hit)

    manifest.save()
    if failed:
        sys.exit(1)


def main():
    cli()


if __name__ == "__main__":
    main()
