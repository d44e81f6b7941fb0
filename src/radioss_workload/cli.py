import asyncio
import logging
import os
import signal
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from .config import PACKAGES_DIR, WorkloadConfig
from .errors import WorkloadError
from .executor import OpenRadiossExecutor
from .packages import DirectoryPackageProvider
from .parsing import Metric

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    log_level_str = "DEBUG" if verbose else os.getenv("RADIOSS_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level_str, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )


async def _run(executor: OpenRadiossExecutor) -> list[Metric]:
    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_event.set)
    except (NotImplementedError, RuntimeError):
        # Windows event loops do not support signal handlers
        pass
    return await executor.run(cancel_event)


@click.command()
@click.option(
    "--packages-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Root directory of installed packages (default: RADIOSS_PACKAGES_DIR or ./packages)",
)
@click.option("--package-name", default="openradioss", show_default=True)
@click.option(
    "--visualcpp-package-name",
    default=None,
    help="Visual C++ redistributable package (Windows)",
)
@click.option(
    "--thread-count", type=int, default=None, help="Threads passed to the Linux run script"
)
@click.option("--command-line", default=None, help="Arguments for the Windows run script")
@click.option("--scenario", default=None)
@click.option("--metric-scenario", default=None)
@click.option("--tag", "tags", multiple=True, help="Tag attached to emitted metrics (repeatable)")
@click.option("--dry-run", is_flag=True, help="Print the execution plan without running it")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(
    packages_dir: Path | None,
    package_name: str,
    visualcpp_package_name: str | None,
    thread_count: int | None,
    command_line: str | None,
    scenario: str | None,
    metric_scenario: str | None,
    tags: tuple[str, ...],
    dry_run: bool,
    verbose: bool,
) -> None:
    """Run the OpenRadioss benchmark and print its metrics."""
    load_dotenv()
    _configure_logging(verbose)

    try:
        config = WorkloadConfig.from_parameters(
            {
                "PackageName": package_name,
                "VisualcppPackageName": visualcpp_package_name,
                "CommandLine": command_line,
                "ThreadCount": thread_count,
                "Scenario": scenario,
                "MetricScenario": metric_scenario,
                "Tags": list(tags),
            }
        )
        executor = OpenRadiossExecutor(
            config, DirectoryPackageProvider(packages_dir or PACKAGES_DIR)
        )

        if dry_run:
            platform_plan = asyncio.run(executor.initialize())
            for stage in platform_plan.plan:
                click.echo(f"[{stage.name}] {stage.command_line}  (cwd: {stage.working_directory})")
            click.echo(f"results: {platform_plan.results_path}")
            return

        metrics = asyncio.run(_run(executor))
    except WorkloadError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        click.echo(f"Reason: {exc.reason.value}", err=True)
        sys.exit(1)

    if not metrics:
        click.echo("Run cancelled; no metrics captured.", err=True)
        sys.exit(130)
    for metric in metrics:
        click.echo(f"{metric.name}\t{metric.value}\t{metric.unit}")


if __name__ == "__main__":
    main()
