"""RegistrySnapshot - read-only vehicle data pulled from the external registry."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _integer(value: Any) -> Optional[int]:
    """Coerce registry numbers like '2015', 185000.0 or '185 000'; None if not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value).replace(" ", "").replace(",", "")
    try:
        return int(float(text))
    except ValueError:
        return None


@dataclass(frozen=True)
class RegistrySnapshot:
    """
    A vehicle snapshot from the registry.

    Every field may be None, meaning "no information" - never "clear it".
    Dates are kept in the registry's own representation; the reconciler
    converts them.
    """

    road_worthiness_date: Optional[str] = None
    insurance_policy_date: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    mileage: Optional[int] = None

    @classmethod
    def from_dict(cls, dct: Optional[Dict[str, Any]]) -> "RegistrySnapshot":
        """Build from the registry's camelCase payload."""
        dct = dct or {}
        insurance = dct.get("insurancePolicyDate")
        if insurance is None:
            insurance = dct.get("lastPolicyDate")
        return cls(
            road_worthiness_date=_text(dct.get("roadWorthinessDate")),
            insurance_policy_date=_text(insurance),
            make=_text(dct.get("make")),
            model=_text(dct.get("model")),
            year=_integer(dct.get("year")),
            mileage=_integer(dct.get("mileage")),
        )
