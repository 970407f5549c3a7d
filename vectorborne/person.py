"""Reference host implementation.

A Person carries one HealthState per tracked strain, a weekly activity
schedule that decides where they are on a given day, and a record of
every exposure they have had.

Natural history per strain: S → E → I → R with whole-day latent and
infectious periods. Cross-strain immunity (UNSUSCEPTIBLE) is applied by
the transmission model, not here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from vectorborne.types import HealthState, HostLike, InfectionSource, LocationLike

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class ExposureEvent:
    """One exposure of a host to a strain."""
    strain: int
    day: int
    place: LocationLike
    source: Union[HostLike, InfectionSource]

    @property
    def is_vector_borne(self) -> bool:
        return isinstance(self.source, InfectionSource)


class Person:
    """A host that can be bitten by and infected by vectors."""

    def __init__(
        self,
        person_id: int,
        age: int,
        n_strains: int,
        home: Optional[LocationLike] = None,
        weekly_schedule: Optional[Dict[int, Sequence[LocationLike]]] = None,
    ):
        """
        Args:
            person_id: Unique id (diagnostics only).
            age: Age in years (diagnostics only).
            n_strains: Number of tracked strains.
            home: Place visited every day.
            weekly_schedule: Extra places by weekday (day % 7 → places).
        """
        self.person_id = person_id
        self.age = age
        self.home = home
        self.weekly_schedule = weekly_schedule or {}

        self.health = np.full(n_strains, HealthState.SUSCEPTIBLE, dtype=np.int8)
        self.exposure_day = np.full(n_strains, -1, dtype=np.int64)
        self.exposures: List[ExposureEvent] = []

        self._schedule_day: Optional[int] = None
        self._today: List[LocationLike] = []

    def __repr__(self) -> str:
        return f"Person({self.person_id}, age={self.age})"

    def get_id(self) -> int:
        return self.person_id

    def get_age(self) -> int:
        return self.age

    # ── Schedule ─────────────────────────────────────────────────────

    def update_schedule(self, day: int) -> None:
        """Work out which places this person visits on `day`. Cached per day."""
        if self._schedule_day == day:
            return
        places: List[LocationLike] = []
        if self.home is not None:
            places.append(self.home)
        for place in self.weekly_schedule.get(day % DAYS_PER_WEEK, ()):
            if not any(place is p for p in places):
                places.append(place)
        self._today = places
        self._schedule_day = day

    def get_activity_places(self, day: int) -> List[LocationLike]:
        self.update_schedule(day)
        return list(self._today)

    def is_present(self, day: int, place: LocationLike) -> bool:
        self.update_schedule(day)
        return any(place is p for p in self._today)

    # ── Health ───────────────────────────────────────────────────────

    def get_health_state(self, strain: int) -> HealthState:
        return HealthState(int(self.health[strain]))

    def is_susceptible(self, strain: int) -> bool:
        return bool(self.health[strain] == HealthState.SUSCEPTIBLE)

    def is_infectious(self, strain: int) -> bool:
        return bool(self.health[strain] == HealthState.INFECTIOUS)

    def become_exposed(
        self,
        strain: int,
        source: Union[HostLike, InfectionSource],
        place: LocationLike,
        day: int,
    ) -> None:
        """Start an infection with `strain`.

        `source` is the infecting host, or an InfectionSource when the
        infection came from the vector population.
        """
        self.health[strain] = HealthState.EXPOSED
        self.exposure_day[strain] = day
        self.exposures.append(ExposureEvent(strain, day, place, source))

    def become_infectious(self, strain: int) -> None:
        self.health[strain] = HealthState.INFECTIOUS

    def become_unsusceptible(self, strain: int) -> None:
        """Remove susceptibility to `strain`. Active infections are untouched."""
        if self.health[strain] == HealthState.SUSCEPTIBLE:
            self.health[strain] = HealthState.UNSUSCEPTIBLE

    def update_health(self, day: int, latent_period: int,
                      infectious_period: int) -> None:
        """Advance E → I → R for every strain by whole-day durations."""
        for strain in range(len(self.health)):
            state = self.health[strain]
            if state not in (HealthState.EXPOSED, HealthState.INFECTIOUS):
                continue
            elapsed = day - self.exposure_day[strain]
            if elapsed >= latent_period + infectious_period:
                self.health[strain] = HealthState.RECOVERED
            elif elapsed >= latent_period:
                self.health[strain] = HealthState.INFECTIOUS
