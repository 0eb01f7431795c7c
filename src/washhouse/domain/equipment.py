# src/washhouse/domain/equipment.py
from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from washhouse.domain.deal import MachineType


@dataclass(frozen=True)
class ReplacementSpec:
    lifespan_years: int       # expected service life of one machine
    replacement_cost: float   # flat cost to replace one unit


class EquipmentCatalog(Mapping[str, ReplacementSpec]):
    """
    Read-only lookup of machine type -> replacement profile.

    Pass a different catalog to the scheduler to model another market or
    vendor price list; the default one is never mutated.
    """

    def __init__(self, specs: Mapping[str, ReplacementSpec]):
        self._specs = MappingProxyType(dict(specs))

    def __getitem__(self, machine_type: str) -> ReplacementSpec:
        return self._specs[machine_type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __repr__(self) -> str:
        return f"EquipmentCatalog({dict(self._specs)!r})"

    def with_overrides(self, overrides: Mapping[str, ReplacementSpec]) -> "EquipmentCatalog":
        merged = dict(self._specs)
        merged.update(overrides)
        return EquipmentCatalog(merged)

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {
            machine_type: {
                "lifespan_years": spec.lifespan_years,
                "replacement_cost": spec.replacement_cost,
            }
            for machine_type, spec in self._specs.items()
        }


_DEFAULT_SPECS: dict[MachineType, ReplacementSpec] = {
    "Top-Load Washer": ReplacementSpec(lifespan_years=12, replacement_cost=800.0),
    "Front-Load Washer": ReplacementSpec(lifespan_years=15, replacement_cost=1200.0),
    "Stacked Washer/Dryer": ReplacementSpec(lifespan_years=12, replacement_cost=1500.0),
    "Single Dryer": ReplacementSpec(lifespan_years=15, replacement_cost=900.0),
    "Stacked Dryer": ReplacementSpec(lifespan_years=15, replacement_cost=1100.0),
}

DEFAULT_EQUIPMENT_CATALOG = EquipmentCatalog(_DEFAULT_SPECS)
