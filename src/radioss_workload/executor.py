import asyncio
import logging

from .artifacts import ResultArtifactGate
from .cleanup import CleanupController
from .config import WorkloadConfig
from .errors import ResultsNotFoundError, SchemaError, UnsupportedPlatformError
from .observability import EventTelemetry, TelemetrySink, log_event, run_scope
from .orchestrator import ProcessOrchestrator, RunResult
from .packages import DependencyPath, PackageProvider
from .parsing import OPENRADIOSS_PARSER, Metric, MetricsParser
from .platforms import (
    OPENRADIOSS_PACKAGE,
    PlatformPlan,
    current_platform,
    get_variant,
    is_supported,
)
from .process import ProcessResult, ProcessRuntime

logger = logging.getLogger(__name__)

TOOL_NAME = "OpenRadioss"


class OpenRadiossExecutor:
    """Runs the OpenRadioss benchmark once and reports its metrics.

    Lifecycle: ``initialize`` resolves packages and builds the platform plan,
    ``execute`` runs it and parses the results, ``cleanup`` kills leftover
    benchmark processes. ``run`` chains the three and always cleans up.

    Only one run per host may use a given results path and process name at a
    time; callers serialize concurrent runs.
    """

    def __init__(
        self,
        config: WorkloadConfig,
        packages: PackageProvider,
        *,
        runtime: ProcessRuntime | None = None,
        telemetry: TelemetrySink | None = None,
        parser: MetricsParser | None = None,
        platform: str | None = None,
        architecture: str | None = None,
    ) -> None:
        host_platform, host_architecture = current_platform()
        self.config = config
        self.packages = packages
        self.platform = platform or host_platform
        self.architecture = architecture or host_architecture
        self.runtime = runtime or ProcessRuntime()
        self.telemetry = telemetry or EventTelemetry()
        self.parser = parser or OPENRADIOSS_PARSER
        self.orchestrator = ProcessOrchestrator(self.runtime, self.telemetry)
        self.cleanup_controller = CleanupController(self.runtime)

        self.package: DependencyPath | None = None
        self.platform_plan: PlatformPlan | None = None

    @property
    def executable_path(self) -> str | None:
        return self.platform_plan.executable_path if self.platform_plan else None

    @property
    def results_path(self) -> str | None:
        return self.platform_plan.results_path if self.platform_plan else None

    def is_supported(self) -> bool:
        supported = is_supported(self.platform, self.architecture)
        if not supported:
            self.telemetry.log_not_supported(TOOL_NAME, self.platform, self.architecture)
        return supported

    async def initialize(self) -> PlatformPlan:
        """Resolve required packages and build the execution plan.

        Raises:
            UnsupportedPlatformError: No plan exists for this platform/architecture.
            PackageNotFoundError: A required package is not installed.
        """
        variant = get_variant(self.platform, self.architecture)

        resolved: dict[str, DependencyPath] = {}
        for requirement in variant.required_packages(self.config):
            if requirement.platform_specific:
                package = await self.packages.get_platform_specific_package(
                    requirement.name, self.platform, self.architecture
                )
            else:
                package = await self.packages.get_package(requirement.name)
            resolved[requirement.role] = package

        self.package = resolved[OPENRADIOSS_PACKAGE]
        self.platform_plan = variant.build(
            {role: package.path for role, package in resolved.items()}, self.config
        )
        logger.info(
            "Prepared %d-stage plan for %s-%s (results: %s)",
            len(self.platform_plan.plan),
            self.platform,
            self.architecture,
            self.platform_plan.results_path,
        )
        return self.platform_plan

    async def execute(self, cancel_event: asyncio.Event | None = None) -> list[Metric]:
        """Run the plan and return the parsed metrics.

        Returns an empty list when the run was cancelled.

        Raises:
            StageFailedError: A stage reported error output.
            ResultsNotFoundError: All stages completed but no results file was written.
            SchemaError: The results file is empty or malformed.
        """
        platform_plan = self.platform_plan or await self.initialize()
        gate = ResultArtifactGate(platform_plan.results_path)
        gate.clear()

        result = await self.orchestrator.run(platform_plan.plan, cancel_event)
        if result.cancelled:
            logger.info("%s run cancelled after %d stage(s)", TOOL_NAME, len(result.executions))
            return []
        if result.failure is not None:
            raise result.failure.to_error()

        artifact = await gate.load(cancel_event)
        if artifact.cancelled:
            logger.info("%s run cancelled before results were read", TOOL_NAME)
            return []
        if not artifact.exists or artifact.content is None:
            raise ResultsNotFoundError(artifact.path)

        outcome = self.parser.try_parse(artifact.content)
        if outcome.error is not None:
            log_event(
                {
                    "kind": "parse_error",
                    "level": "error",
                    "results_path": artifact.path,
                    "field": outcome.field_name,
                    "error": outcome.error,
                }
            )
            raise SchemaError(outcome.error)

        self._capture_metrics(result, outcome.metrics)
        return outcome.metrics

    def _capture_metrics(self, result: RunResult, metrics: list[Metric]) -> None:
        execution = result.last_execution
        if execution is None:
            return
        process: ProcessResult = execution.process
        metadata = {
            "scenario_name": TOOL_NAME,
            "scenario_arguments": process.full_command,
            "tool_version": self.package.version if self.package else None,
            "platform": f"{self.platform}-{self.architecture}",
        }
        self.telemetry.log_metrics(
            TOOL_NAME,
            self.config.effective_metric_scenario,
            process.start_time,
            process.exit_time,
            metrics,
            process.full_command,
            tags=self.config.tags,
            metadata=metadata,
        )

    async def cleanup(self) -> int:
        return self.cleanup_controller.cleanup(self.config.process_name)

    async def run(self, cancel_event: asyncio.Event | None = None) -> list[Metric]:
        with run_scope(self.config.scenario):
            try:
                if not self.is_supported():
                    raise UnsupportedPlatformError(self.platform, self.architecture)
                await self.initialize()
                return await self.execute(cancel_event)
            finally:
                await self.cleanup()
