"""Reference place implementation for the vector transmission model.

A Place is where hosts and vectors co-occur for a day. It owns:
  - Vector counters: one susceptible pool, plus exposed and infectious
    counts per strain (fixed-size NumPy arrays)
  - Extrinsic incubation: exposed vectors become infectious a fixed number
    of days after exposure (daily cohort buffer)
  - Enrollees: the ordered list of hosts that use this place
  - Per-day, per-strain registry of infectious hosts present today
  - The shared "vectors already infected today" flag
  - Open window and per-strain closure policy
  - First/last infectious day bookkeeping

Vectors are neither born nor die here; the susceptible pool only shrinks
as vectors are exposed.
"""

from __future__ import annotations

import math
from collections import deque
from typing import Deque, List, Optional, Sequence, Set, Tuple

import numpy as np

from vectorborne.types import HostLike


class Place:
    """One location with its resident vector population."""

    def __init__(
        self,
        place_id: int,
        n_strains: int,
        susceptible_vectors: int = 0,
        incubation_period: float = 11.0,
        label: str = "",
        open_from: int = 0,
        open_until: Optional[int] = None,
    ):
        """
        Args:
            place_id: Index of this place (also selects its RNG stream).
            n_strains: Number of tracked strains.
            susceptible_vectors: Initial susceptible vector count.
            incubation_period: Days from vector exposure to infectiousness.
            label: Free-text name for diagnostics.
            open_from: First day the place operates.
            open_until: Last day the place operates (None = forever).
        """
        self.place_id = place_id
        self.label = label or f"place_{place_id}"
        self.n_strains = n_strains
        self.incubation_period = incubation_period
        self.open_from = open_from
        self.open_until = open_until

        self.susceptible_vectors = int(susceptible_vectors)
        self.exposed_vectors = np.zeros(n_strains, dtype=np.int64)
        self.infectious_vectors = np.zeros(n_strains, dtype=np.int64)
        self.cumulative_vector_infections = np.zeros(n_strains, dtype=np.int64)

        self.enrollees: List[HostLike] = []
        self._infectious_people: List[List[HostLike]] = [[] for _ in range(n_strains)]

        # (start_day, end_day, strain or None for all strains), inclusive
        self._closures: List[Tuple[int, int, Optional[int]]] = []

        self.first_infectious_day = -1
        self.last_infectious_day = -1

        self._today = 0
        self._vectors_infected_today = False
        self._strains_reset: Set[int] = set()
        # (exposure_day, per-strain counts) awaiting end of incubation
        self._exposed_cohorts: Deque[Tuple[int, np.ndarray]] = deque()

    def __repr__(self) -> str:
        return (
            f"Place({self.place_id}, label={self.label!r}, "
            f"hosts={len(self.enrollees)}, S_vectors={self.susceptible_vectors})"
        )

    # ── Hosts ────────────────────────────────────────────────────────

    def enroll(self, host: HostLike) -> None:
        """Add a host to this place's enrollee list (order is preserved)."""
        self.enrollees.append(host)

    def unenroll(self, host: HostLike) -> None:
        self.enrollees.remove(host)

    def get_enrollees(self) -> Sequence[HostLike]:
        return self.enrollees

    def get_size(self) -> int:
        """Total occupancy: every enrolled host, infectious or not."""
        return len(self.enrollees)

    def add_infectious_person(self, strain: int, host: HostLike) -> None:
        """Register a host as infectious with `strain` here today."""
        self._infectious_people[strain].append(host)

    def get_infectious_people(self, strain: int) -> Sequence[HostLike]:
        return self._infectious_people[strain]

    def get_number_of_infectious_people(self, strain: int) -> int:
        return len(self._infectious_people[strain])

    # ── Vectors ──────────────────────────────────────────────────────

    def get_susceptible_vectors(self) -> int:
        return self.susceptible_vectors

    def get_exposed_vectors(self, strain: int) -> int:
        return int(self.exposed_vectors[strain])

    def get_infectious_vectors(self, strain: int) -> int:
        return int(self.infectious_vectors[strain])

    def set_infectious_vectors(self, strain: int, count: int) -> None:
        """Seed infectious vectors directly (initial conditions, importation)."""
        self.infectious_vectors[strain] = count

    def expose_vectors(self, strain: int, count: int) -> int:
        """Move up to `count` susceptible vectors into the exposed class.

        Returns:
            Number of vectors actually exposed (bounded by the susceptible pool).
        """
        n = min(int(count), self.susceptible_vectors)
        if n <= 0:
            return 0
        self.susceptible_vectors -= n
        self.exposed_vectors[strain] += n
        self.cumulative_vector_infections[strain] += n

        if self._exposed_cohorts and self._exposed_cohorts[-1][0] == self._today:
            self._exposed_cohorts[-1][1][strain] += n
        else:
            cohort = np.zeros(self.n_strains, dtype=np.int64)
            cohort[strain] = n
            self._exposed_cohorts.append((self._today, cohort))
        return n

    def update_vector_population(self, day: int) -> int:
        """Complete extrinsic incubation for cohorts exposed long enough ago.

        A cohort exposed on day d becomes infectious on day
        d + ceil(incubation_period).

        Returns:
            Number of vectors that became infectious.
        """
        delay = max(1, math.ceil(self.incubation_period))
        matured = 0
        while self._exposed_cohorts and self._exposed_cohorts[0][0] + delay <= day:
            _, cohort = self._exposed_cohorts.popleft()
            self.exposed_vectors -= cohort
            self.infectious_vectors += cohort
            matured += int(cohort.sum())
        return matured

    # ── Per-day state ────────────────────────────────────────────────

    def begin_day(self, day: int) -> None:
        """Start a new simulated day: incubate vectors, clear daily flags."""
        self._today = day
        self._vectors_infected_today = False
        self._strains_reset.clear()
        for people in self._infectious_people:
            people.clear()
        self.update_vector_population(day)

    def have_vectors_been_infected_today(self) -> bool:
        return self._vectors_infected_today

    def mark_vectors_as_infected_today(self) -> None:
        self._vectors_infected_today = True

    def reset_place_state(self, strain: int) -> None:
        """Clear today's transient state for `strain`. Idempotent.

        Once every tracked strain has been reset, the place's day is over
        and the shared vectors-infected-today flag is cleared as well.
        """
        self._infectious_people[strain].clear()
        self._strains_reset.add(strain)
        if len(self._strains_reset) == self.n_strains:
            self._vectors_infected_today = False
            self._strains_reset.clear()

    def record_infectious_days(self, day: int) -> None:
        if self.first_infectious_day == -1 or day < self.first_infectious_day:
            self.first_infectious_day = day
        if day > self.last_infectious_day:
            self.last_infectious_day = day

    # ── Opening policy ───────────────────────────────────────────────

    def is_open(self, day: int) -> bool:
        if day < self.open_from:
            return False
        return self.open_until is None or day <= self.open_until

    def add_closure(self, start_day: int, end_day: int,
                    strain: Optional[int] = None) -> None:
        """Schedule a closure over [start_day, end_day] for one strain or all."""
        if end_day < start_day:
            raise ValueError(
                f"Closure end_day ({end_day}) must be >= start_day ({start_day})"
            )
        self._closures.append((start_day, end_day, strain))

    def should_be_open(self, day: int, strain: int) -> bool:
        for start, end, closed_strain in self._closures:
            if start <= day <= end and (closed_strain is None or closed_strain == strain):
                return False
        return True
