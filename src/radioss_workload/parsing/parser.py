import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..errors import SchemaError
from .rules import DerivedMetricRule, Metric, Number, ParseRule

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Input text is null or empty."


@dataclass(frozen=True)
class ParseOutcome:
    metrics: list[Metric] = field(default_factory=list)
    error: str | None = None
    field_name: str | None = None
    """Rule that caused the failure, when one did."""

    @property
    def ok(self) -> bool:
        return self.error is None


class MetricsParser:
    """Turns unstructured benchmark text into an ordered list of metrics.

    Base metrics come first in rule order, derived metrics follow in their
    declared order. Any failure returns no metrics at all.
    """

    def __init__(
        self, rules: Iterable[ParseRule], derived: Iterable[DerivedMetricRule] = ()
    ) -> None:
        self.rules = tuple(rules)
        self.derived = tuple(derived)

    def try_parse(self, raw_text: str | None) -> ParseOutcome:
        if not raw_text:
            return ParseOutcome(error=EMPTY_INPUT_MESSAGE)

        metrics: list[Metric] = []
        values: dict[str, Number] = {}
        for rule in self.rules:
            value = rule.extract(raw_text)
            if value is None:
                if rule.required:
                    return ParseOutcome(
                        error=f"Unable to parse {rule.label}.", field_name=rule.name
                    )
                logger.debug("Optional metric %s not present", rule.name)
                continue
            values[rule.name] = value
            metrics.append(Metric(rule.name, value, rule.unit))

        for derived in self.derived:
            missing = [name for name in derived.inputs if name not in values]
            if missing:
                logger.debug("Skipping %s, inputs not extracted: %s", derived.name, missing)
                continue
            for name in derived.positive_inputs:
                if values[name] <= 0:
                    return ParseOutcome(
                        error=f"Cannot compute {derived.name}: {name} must be positive, "
                        f"got {values[name]}.",
                        field_name=name,
                    )
            result = derived.compute(*(values[name] for name in derived.inputs))
            value = derived.kind.convert(result)
            values[derived.name] = value
            metrics.append(Metric(derived.name, value, derived.unit))

        return ParseOutcome(metrics=metrics)

    def parse(self, raw_text: str | None) -> list[Metric]:
        """Parse ``raw_text``.

        Raises:
            SchemaError: Input is empty, a required value is missing, or a
                derived value cannot be computed.
        """
        outcome = self.try_parse(raw_text)
        if outcome.error is not None:
            raise SchemaError(outcome.error)
        return outcome.metrics
