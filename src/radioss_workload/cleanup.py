import logging

import psutil

from .observability import log_event
from .process import ProcessRuntime

logger = logging.getLogger(__name__)


class CleanupController:
    """Kills benchmark processes that outlive the run (e.g. started via sudo or a batch script)."""

    def __init__(self, runtime: ProcessRuntime) -> None:
        self.runtime = runtime

    def cleanup(self, process_name: str) -> int:
        """Terminate every running process named ``process_name``.

        Never raises; processes that already exited are skipped.

        Returns:
            Number of processes terminated.
        """
        try:
            running = self.runtime.get_processes(process_name)
        except psutil.Error as exc:
            logger.warning("Could not enumerate %s processes: %s", process_name, exc)
            return 0

        terminated = 0
        for proc in running:
            if self.runtime.safe_kill(proc):
                terminated += 1

        if running:
            logger.info(
                "Cleanup terminated %d of %d %s process(es)", terminated, len(running), process_name
            )
            log_event(
                {
                    "kind": "cleanup",
                    "level": "info",
                    "process_name": process_name,
                    "matched": len(running),
                    "terminated": terminated,
                }
            )
        return terminated
