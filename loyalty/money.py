"""
Monetary amounts in minor units (cents, øre).
"""

from dataclasses import dataclass
from decimal import Decimal

from loyalty.exceptions import InvalidArgumentError

# Largest value a PositiveBigIntegerField column can hold
MAX_MINOR_UNITS = 2**63 - 1


@dataclass(frozen=True)
class Amount:
    """
    A non-negative integer count of minor currency units.

    Arithmetic never wraps or saturates: a subtraction that would go below
    zero raises InvalidArgumentError.
    """

    minor_units: int

    def __post_init__(self):
        # bool is an int subclass, but True is not an amount of money
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise InvalidArgumentError(f"Amount must be an integer number of minor units, got {self.minor_units!r}.")
        if self.minor_units < 0:
            raise InvalidArgumentError(f"Amount cannot be negative, got {self.minor_units}.")
        if self.minor_units > MAX_MINOR_UNITS:
            raise InvalidArgumentError(f"Amount cannot exceed {MAX_MINOR_UNITS}, got {self.minor_units}.")

    def __add__(self, other):
        return Amount(self.minor_units + _units(other))

    def __sub__(self, other):
        other_units = _units(other)
        if other_units > self.minor_units:
            raise InvalidArgumentError(f"Cannot subtract {other_units} from {self.minor_units}: result would be negative.")
        return Amount(self.minor_units - other_units)

    def points_at(self, rate) -> int:
        """
        Points earned on this amount at `rate` (a fraction, e.g. 0.02 for 2%).

        The product is truncated, never rounded up.
        Example: Amount(500).points_at(Decimal("0.02")) == 10
        """
        rate = rate if isinstance(rate, Decimal) else Decimal(str(rate))
        if rate < 0:
            raise InvalidArgumentError(f"Points percentage cannot be negative, got {rate}.")
        return int(rate * self.minor_units)


def _units(value) -> int:
    if isinstance(value, Amount):
        return value.minor_units
    return Amount(value).minor_units
