"""CLI command computing the primary (Maven revision) version."""

from pathlib import Path
from typing import Optional

import click

from gitflow_version.config import Settings
from gitflow_version.versioning import (
    GitRepository,
    MergeSignalProbe,
    PomRevisionStore,
    ResultReporter,
    TransitionEngine,
    VersioningError,
    calculate_primary_version,
    resolve_branch,
)

from .options import (
    add_common_options,
    build_revision_writer,
    fail,
    log_banner,
    resolve_artifact,
)
from .utils.logging import configure_logging, logger


@click.command("calculate")
@add_common_options
@click.option(
    "--pom",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to the Maven pom.xml (default from config: pom.xml).",
)
@click.pass_context
def calculate(
    ctx,
    dry_run: bool,
    verbose: bool,
    output_format: str,
    workspace: str,
    branch: Optional[str],
    pom: Optional[str],
):
    """Calculate the GitFlow version and set the pom.xml revision."""
    reporter = ResultReporter(output_format)
    configure_logging(verbose, reporter.structured)
    workspace_dir = Path(workspace).resolve()
    logger.info(f"ℹ️  Working in directory: {workspace_dir}")

    try:
        settings = Settings.for_workspace(workspace_dir)
        repository = GitRepository(workspace_dir)
        branch = resolve_branch(workspace_dir, branch, repository)

        log_banner(
            "Version Calculator",
            Branch=branch,
            Workspace=workspace_dir,
            **{
                "Dry run": dry_run,
                "Verbose": verbose,
                "Output format": output_format,
            },
        )

        writer = build_revision_writer(
            settings.revision_writer, quiet=reporter.structured
        )
        store = PomRevisionStore(
            resolve_artifact(workspace_dir, pom or settings.pom), writer
        )
        engine = TransitionEngine(MergeSignalProbe(repository), settings.windows())

        result = calculate_primary_version(
            store,
            branch,
            engine,
            dry_run=dry_run,
            repository=repository,
            show_diff=verbose and not reporter.structured,
        )
    except VersioningError as e:
        fail(ctx, reporter, e, branch=branch)
        return

    reporter.emit(reporter.build(result.old_version, result.new_version, result.branch))
    logger.info("✅ === Version calculation complete ===")
