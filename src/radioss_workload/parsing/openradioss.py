import math
import re

from .parser import MetricsParser
from .rules import DerivedMetricRule, NumericKind, ParseRule

# STARTER+ENGINE RUNTIME =    66370.16s (18:26:10)
STARTER_ENGINE_RUNTIME = ParseRule(
    name="StarterEngineRuntime",
    label="STARTER+ENGINE RUNTIME",
    pattern=re.compile(r"STARTER\+ENGINE RUNTIME =\s+([\d.]+)s \(([\d:]+)\)"),
    unit="seconds",
    kind=NumericKind.FLOAT,
)

# TOTAL NUMBER OF CYCLES  :    160039
TOTAL_NUMBER_OF_CYCLES = ParseRule(
    name="TotalNumberOfCycles",
    label="TOTAL NUMBER OF CYCLES",
    pattern=re.compile(r"TOTAL NUMBER OF CYCLES\s+:\s+(\d+)"),
    unit="cycles",
    kind=NumericKind.INTEGER,
)


def cycles_per_minute(runtime_seconds: float, total_cycles: int) -> int:
    return math.floor(total_cycles * 60 / runtime_seconds)


NUMBER_OF_CYCLES_PER_MINUTE = DerivedMetricRule(
    name="NumberOfCyclesPerMinute",
    unit="cycles/min",
    inputs=(STARTER_ENGINE_RUNTIME.name, TOTAL_NUMBER_OF_CYCLES.name),
    compute=cycles_per_minute,
    kind=NumericKind.INTEGER,
    positive_inputs=(STARTER_ENGINE_RUNTIME.name,),
)


def build_openradioss_parser() -> MetricsParser:
    return MetricsParser(
        rules=(STARTER_ENGINE_RUNTIME, TOTAL_NUMBER_OF_CYCLES),
        derived=(NUMBER_OF_CYCLES_PER_MINUTE,),
    )


OPENRADIOSS_PARSER = build_openradioss_parser()
