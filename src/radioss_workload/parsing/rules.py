import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

Number = int | float


class NumericKind(str, Enum):
    FLOAT = "float"
    INTEGER = "integer"

    def convert(self, raw: str | Number) -> Number:
        # float()/int() ignore the process locale: decimal point, no grouping.
        if self is NumericKind.INTEGER:
            return int(raw)
        return float(raw)


@dataclass(frozen=True)
class Metric:
    """A single named measurement emitted to telemetry."""

    name: str
    value: Number
    unit: str


@dataclass(frozen=True)
class ParseRule:
    """One value extracted from raw text by regular expression.

    The first capture group of ``pattern`` holds the number.
    """

    name: str
    label: str
    """Text used in error messages when the rule does not match."""

    pattern: re.Pattern[str]
    unit: str
    kind: NumericKind = NumericKind.FLOAT
    required: bool = True

    def extract(self, text: str) -> Number | None:
        match = self.pattern.search(text)
        if match is None:
            return None
        try:
            return self.kind.convert(match.group(1))
        except ValueError:
            return None


@dataclass(frozen=True)
class DerivedMetricRule:
    """A metric computed from previously extracted values.

    ``compute`` receives the values named in ``inputs`` positionally.
    """

    name: str
    unit: str
    inputs: tuple[str, ...]
    compute: Callable[..., Number]
    kind: NumericKind = NumericKind.FLOAT
    positive_inputs: tuple[str, ...] = ()
    """Inputs that must be strictly greater than zero (divisors)."""


__all__ = ["DerivedMetricRule", "Metric", "Number", "NumericKind", "ParseRule"]
