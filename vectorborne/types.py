"""Core data types for vectorborne.

This module is the single source of truth for:
  - HealthState: per-strain host compartments
  - MAX_STRAINS: capacity of the tracked strain set
  - InfectionSource / NO_SOURCE: origin of a vector-borne exposure
  - Collaborator protocols consumed by the transmission core
    (LocationLike, HostLike, DiseaseLike, DiseaseRegistry, VectorParametersLike)

The transmission core only talks to places, hosts and the disease registry
through these protocols; place.py and person.py are reference
implementations, not requirements.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Iterator, Protocol, Sequence, Union, runtime_checkable


# ═══════════════════════════════════════════════════════════════════════
# CONSTANTS
# ═══════════════════════════════════════════════════════════════════════

MAX_STRAINS = 4   # Four dengue serotypes


# ═══════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════

class HealthState(IntEnum):
    """Per-strain host compartments.

    SUSCEPTIBLE   → EXPOSED        (bite by an infectious vector)
    EXPOSED       → INFECTIOUS     (after the latent period)
    INFECTIOUS    → RECOVERED      (after the infectious period)
    SUSCEPTIBLE   → UNSUSCEPTIBLE  (cross-strain immunity on exposure to another strain)
    """
    SUSCEPTIBLE   = 0
    EXPOSED       = 1
    INFECTIOUS    = 2
    RECOVERED     = 3
    UNSUSCEPTIBLE = 4


class InfectionSource(Enum):
    """Origin of an exposure that has no originating host.

    Vector-borne infections come from the vector population at a place,
    never from one identifiable prior host.
    """
    VECTOR = "vector"


NO_SOURCE = InfectionSource.VECTOR


# ═══════════════════════════════════════════════════════════════════════
# COLLABORATOR PROTOCOLS
# ═══════════════════════════════════════════════════════════════════════

@runtime_checkable
class HostLike(Protocol):
    """A person who can be bitten by and infected by vectors."""

    def get_id(self) -> int: ...

    def get_age(self) -> int: ...

    def update_schedule(self, day: int) -> None: ...

    def is_present(self, day: int, place: "LocationLike") -> bool: ...

    def is_susceptible(self, strain: int) -> bool: ...

    def become_exposed(
        self,
        strain: int,
        source: "Union[HostLike, InfectionSource]",
        place: "LocationLike",
        day: int,
    ) -> None: ...

    def become_unsusceptible(self, strain: int) -> None: ...


@runtime_checkable
class LocationLike(Protocol):
    """A place where hosts and vectors co-occur for a day."""

    def is_open(self, day: int) -> bool: ...

    def should_be_open(self, day: int, strain: int) -> bool: ...

    def reset_place_state(self, strain: int) -> None: ...

    def record_infectious_days(self, day: int) -> None: ...

    def have_vectors_been_infected_today(self) -> bool: ...

    def mark_vectors_as_infected_today(self) -> None: ...

    def get_susceptible_vectors(self) -> int: ...

    def get_size(self) -> int: ...

    def get_number_of_infectious_people(self, strain: int) -> int: ...

    def expose_vectors(self, strain: int, count: int) -> int: ...

    def get_infectious_vectors(self, strain: int) -> int: ...

    def get_enrollees(self) -> Sequence[HostLike]: ...


class DiseaseLike(Protocol):
    def get_id(self) -> int: ...

    def get_transmissibility(self) -> float: ...


class DiseaseRegistry(Protocol):
    """Fixed, enumerable set of tracked strains."""

    def get_disease(self, disease_id: int) -> DiseaseLike: ...

    def get_number_of_diseases(self) -> int: ...

    def __iter__(self) -> Iterator[DiseaseLike]: ...


class VectorParametersLike(Protocol):
    def get_infection_efficiency(self) -> float: ...

    def get_transmission_efficiency(self) -> float: ...

    def get_bite_rate(self) -> float: ...
