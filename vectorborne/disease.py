"""Disease registry — the fixed set of tracked strains.

Each strain is a Disease with an integer id (its index in the registry) and
a transmissibility coefficient. Transmissibility is a model-level scaling
factor, not a probability: the vector model only uses it as an on/off
switch (0 disables transmission of that strain everywhere).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence

from vectorborne.config import DiseaseSection
from vectorborne.types import MAX_STRAINS


@dataclass(frozen=True)
class Disease:
    """One tracked strain."""
    disease_id: int
    name: str
    transmissibility: float = 1.0

    def get_id(self) -> int:
        return self.disease_id

    def get_name(self) -> str:
        return self.name

    def get_transmissibility(self) -> float:
        return self.transmissibility


class DiseaseList:
    """Ordered, fixed-size registry of strains indexed by disease id."""

    def __init__(self, diseases: Sequence[Disease]):
        if len(diseases) > MAX_STRAINS:
            raise ValueError(
                f"At most {MAX_STRAINS} strains can be tracked, got {len(diseases)}"
            )
        for i, d in enumerate(diseases):
            if d.disease_id != i:
                raise ValueError(
                    f"Disease ids must match registry order: "
                    f"position {i} holds id {d.disease_id}"
                )
        self._diseases: List[Disease] = list(diseases)

    @classmethod
    def from_config(cls, cfg: DiseaseSection) -> "DiseaseList":
        """Build the registry from the disease config section."""
        return cls([
            Disease(
                disease_id=i,
                name=s.name,
                transmissibility=s.transmissibility,
            )
            for i, s in enumerate(cfg.strains)
        ])

    def get_disease(self, disease_id: int) -> Disease:
        """Look up a strain by id.

        Raises:
            KeyError: If disease_id is not a tracked strain.
        """
        if not 0 <= disease_id < len(self._diseases):
            raise KeyError(
                f"Unknown disease id {disease_id}; "
                f"{len(self._diseases)} strains are tracked"
            )
        return self._diseases[disease_id]

    def get_number_of_diseases(self) -> int:
        return len(self._diseases)

    def __len__(self) -> int:
        return len(self._diseases)

    def __iter__(self) -> Iterator[Disease]:
        return iter(self._diseases)
