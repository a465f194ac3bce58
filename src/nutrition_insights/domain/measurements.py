"""Measurement value type with unit conversion."""

from dataclasses import dataclass
from enum import StrEnum

KG_PER_LB = 0.45359237
CM_PER_IN = 2.54


class Unit(StrEnum):
    """Supported measurement units."""

    KG = "kg"
    LB = "lb"
    CM = "cm"
    IN = "in"


_TO_BASE: dict[Unit, tuple[Unit, float]] = {
    Unit.KG: (Unit.KG, 1.0),
    Unit.LB: (Unit.KG, KG_PER_LB),
    Unit.CM: (Unit.CM, 1.0),
    Unit.IN: (Unit.CM, CM_PER_IN),
}


@dataclass(frozen=True)
class Measurement:
    """A value paired with its unit."""

    value: float
    unit: Unit

    def to_metric(self) -> "Measurement":
        """Return the measurement in kilograms or centimeters."""
        base, _ = _TO_BASE[self.unit]
        return convert(self, base)


def convert(measurement: Measurement, target: Unit) -> Measurement:
    """Convert a measurement to another unit of the same dimension."""
    source_base, source_factor = _TO_BASE[measurement.unit]
    target_base, target_factor = _TO_BASE[target]
    if source_base != target_base:
        raise ValueError(f"Cannot convert {measurement.unit} to {target}")
    return Measurement(
        value=measurement.value * source_factor / target_factor, unit=target
    )
