"""CLI command synchronizing the secondary (npm package.json) version."""

from pathlib import Path
from typing import Optional

import click

from gitflow_version.config import Settings
from gitflow_version.constants import DEFAULT_POM_FILE
from gitflow_version.versioning import (
    GitRepository,
    MergeSignalProbe,
    PackageJsonStore,
    PomRevisionStore,
    ResultReporter,
    TransitionEngine,
    VersioningError,
    resolve_branch,
    sync_secondary_version,
)

from .options import add_common_options, fail, log_banner, resolve_artifact
from .utils.logging import configure_logging, logger


@click.command("sync-npm")
@add_common_options
@click.option(
    "--package-json",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to package.json (default from config: package.json).",
)
@click.option(
    "--sync-with-maven",
    is_flag=True,
    default=False,
    help="Mirror the Maven revision (without -SNAPSHOT) instead of applying branch rules.",
)
@click.option(
    "--maven-pom",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Path to the Maven pom.xml used with --sync-with-maven (default: {DEFAULT_POM_FILE}).",
)
@click.pass_context
def sync_npm(
    ctx,
    dry_run: bool,
    verbose: bool,
    output_format: str,
    workspace: str,
    branch: Optional[str],
    package_json: Optional[str],
    sync_with_maven: bool,
    maven_pom: Optional[str],
):
    """Update the package.json version for the current GitFlow branch."""
    reporter = ResultReporter(output_format)
    configure_logging(verbose, reporter.structured)
    workspace_dir = Path(workspace).resolve()
    logger.info(f"ℹ️  Working in directory: {workspace_dir}")

    try:
        settings = Settings.for_workspace(workspace_dir)
        repository = GitRepository(workspace_dir)
        branch = resolve_branch(workspace_dir, branch, repository)

        log_banner(
            "NPM Version Synchronizer",
            Branch=branch,
            Workspace=workspace_dir,
            **{
                "Dry run": dry_run,
                "Verbose": verbose,
                "Output format": output_format,
                "Sync with Maven": sync_with_maven,
            },
        )

        store = PackageJsonStore(
            resolve_artifact(workspace_dir, package_json or settings.package_json)
        )
        maven_store = None
        if sync_with_maven:
            maven_store = PomRevisionStore(
                resolve_artifact(workspace_dir, maven_pom or settings.pom)
            )
        engine = TransitionEngine(MergeSignalProbe(repository), settings.windows())

        result = sync_secondary_version(
            store,
            branch,
            engine,
            maven_store=maven_store,
            dry_run=dry_run,
            repository=repository,
            show_diff=verbose and not reporter.structured,
        )
    except VersioningError as e:
        fail(
            ctx,
            reporter,
            e,
            branch=branch,
            maven_version=None,
            sync_with_maven=sync_with_maven,
        )
        return

    reporter.emit(
        reporter.build(
            result.old_version,
            result.new_version,
            result.branch,
            maven_version=result.maven_version,
            sync_with_maven=result.sync_with_maven,
        )
    )
    logger.info("✅ === NPM version synchronization complete ===")
    logger.info(f"ℹ️  Previous: {result.old_version}")
    logger.info(f"ℹ️  Current:  {result.new_version}")
    logger.info(f"ℹ️  Branch:   {result.branch}")
