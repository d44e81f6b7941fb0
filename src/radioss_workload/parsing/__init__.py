from .openradioss import (
    NUMBER_OF_CYCLES_PER_MINUTE,
    OPENRADIOSS_PARSER,
    STARTER_ENGINE_RUNTIME,
    TOTAL_NUMBER_OF_CYCLES,
    build_openradioss_parser,
)
from .parser import EMPTY_INPUT_MESSAGE, MetricsParser, ParseOutcome
from .rules import DerivedMetricRule, Metric, NumericKind, ParseRule

__all__ = [
    "DerivedMetricRule",
    "EMPTY_INPUT_MESSAGE",
    "Metric",
    "MetricsParser",
    "NUMBER_OF_CYCLES_PER_MINUTE",
    "NumericKind",
    "OPENRADIOSS_PARSER",
    "ParseOutcome",
    "ParseRule",
    "STARTER_ENGINE_RUNTIME",
    "TOTAL_NUMBER_OF_CYCLES",
    "build_openradioss_parser",
]
