__version__ = "0.1.0.dev0"

from .config import WorkloadConfig
from .errors import ErrorReason, WorkloadError
from .executor import OpenRadiossExecutor
from .parsing import OPENRADIOSS_PARSER, Metric, MetricsParser
from .platforms import dispatch

__all__ = [
    "__version__",
    "ErrorReason",
    "Metric",
    "MetricsParser",
    "OPENRADIOSS_PARSER",
    "OpenRadiossExecutor",
    "WorkloadConfig",
    "WorkloadError",
    "dispatch",
]
