"""Parameters of the redundant device systems."""

from __future__ import annotations

from dataclasses import dataclass


def _variant_fields(n: int, g: int) -> dict:
    """Base system parameters derived from a variant number ``n`` and group ``g``."""
    return {
        "lambda_a": float(g + n % 3),
        "lambda_b": float(g + n % 5),
        "na": 2 + g % 2,
        "nb": 1 + n % 2,
        "ra": 1 + g % 2,
        "rb": 2 - g % 2,
    }


@dataclass(frozen=True)
class SystemParams:
    """Failure rates, required device counts and spare counts of a system.

    ``na``/``nb`` devices of type A/B are required, ``ra``/``rb`` are spares.
    """

    lambda_a: float
    lambda_b: float
    na: int
    nb: int
    ra: int
    rb: int

    @classmethod
    def from_variant(cls, n: int, g: int) -> "SystemParams":
        """Build the parameters assigned to variant ``n`` of group ``g``."""
        return cls(**_variant_fields(n, g))


@dataclass(frozen=True)
class RepairableSystemParams(SystemParams):
    """System parameters extended with the repair rate ``lambda_s``."""

    lambda_s: float

    @classmethod
    def from_variant(cls, n: int, g: int) -> "RepairableSystemParams":
        """Build the repairable parameters assigned to variant ``n`` of group ``g``."""
        fields = _variant_fields(n, g)
        lambda_s = float((fields["na"] + fields["nb"] - g % 2) * (g + n % 4))
        return cls(**fields, lambda_s=lambda_s)