"""Day-loop driver for the vector transmission model.

Advances simulated days over a set of places and people:
  1. Each place starts its day (vector incubation, daily flags cleared)
  2. Host natural history advances (E → I → R)
  3. Infectious hosts are registered at every place they visit today
  4. spread_infection() runs for every (place, strain), each place with
     its own RNG stream

Also provides build_town() to create a simple synthetic population for
single-scenario runs and tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from vectorborne.config import SimulationConfig
from vectorborne.disease import DiseaseList
from vectorborne.person import Person
from vectorborne.place import Place
from vectorborne.rng import create_rng_hierarchy, get_place_rng
from vectorborne.transmission import VectorTransmission
from vectorborne.vectors import VectorParameters

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════
# SETUP
# ═══════════════════════════════════════════════════════════════════════

def configure_logging(verbosity: int) -> None:
    """Map SimulationSection.verbosity onto the package logger level."""
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.getLogger('vectorborne').setLevel(level)


def build_model(config: SimulationConfig) -> VectorTransmission:
    """Create the transmission model from a validated configuration."""
    diseases = DiseaseList.from_config(config.disease)
    vectors = VectorParameters.from_config(config.vectors)
    return VectorTransmission(diseases, vectors)


def build_town(
    config: SimulationConfig,
    n_places: int,
    hosts_per_place: int,
    vectors_per_host: float = 2.0,
    initial_infectious_vectors: Optional[Dict[int, int]] = None,
    p_visit: float = 0.0,
    seed: Optional[int] = None,
) -> Tuple[List[Place], List[Person]]:
    """Build a synthetic town of households with a resident vector population.

    Every person lives at one place. With probability `p_visit` a person
    also visits one other random place on one random weekday.

    Args:
        config: Simulation configuration (strain count, vector incubation).
        n_places: Number of places.
        hosts_per_place: Residents per place.
        vectors_per_host: Susceptible vectors per resident.
        initial_infectious_vectors: {strain: count} seeded at place 0.
        p_visit: Probability that a person has a weekly visit elsewhere.
        seed: Master seed (defaults to simulation.seed). Population setup
            draws from the 'global' stream of its RNG hierarchy, so the
            per-place transmission streams are left untouched.

    Returns:
        (places, people)
    """
    n_strains = len(config.disease.strains)
    master_seed = config.simulation.seed if seed is None else seed
    rng = create_rng_hierarchy(master_seed, n_places)['global']

    places = [
        Place(
            place_id=i,
            n_strains=n_strains,
            susceptible_vectors=int(vectors_per_host * hosts_per_place),
            incubation_period=config.vectors.incubation_period,
        )
        for i in range(n_places)
    ]

    people: List[Person] = []
    for place in places:
        for _ in range(hosts_per_place):
            person = Person(
                person_id=len(people),
                age=int(rng.integers(0, 90)),
                n_strains=n_strains,
                home=place,
            )
            place.enroll(person)
            people.append(person)

    if n_places > 1 and p_visit > 0:
        for person in people:
            if rng.random() < p_visit:
                others = [p for p in places if p is not person.home]
                target = others[int(rng.integers(0, len(others)))]
                weekday = int(rng.integers(0, 7))
                person.weekly_schedule = {weekday: [target]}
                target.enroll(person)

    if initial_infectious_vectors and places:
        for strain, count in initial_infectious_vectors.items():
            places[0].set_infectious_vectors(strain, count)

    return places, people


# ═══════════════════════════════════════════════════════════════════════
# DAILY UPDATE
# ═══════════════════════════════════════════════════════════════════════

def register_infectious_hosts(
    day: int,
    places: Sequence[Place],
    people: Sequence[Person],
) -> None:
    """Add every infectious person to each place they visit today."""
    place_set = {id(p) for p in places}
    for person in people:
        for strain in range(len(person.health)):
            if not person.is_infectious(strain):
                continue
            for place in person.get_activity_places(day):
                if id(place) in place_set:
                    place.add_infectious_person(strain, person)


def run_day(
    day: int,
    places: Sequence[Place],
    people: Sequence[Person],
    transmission: VectorTransmission,
    rngs: Dict[str, np.random.Generator],
    latent_period: int,
    infectious_period: int,
) -> None:
    """One simulated day of vector-borne transmission across all places."""
    for place in places:
        place.begin_day(day)
    for person in people:
        person.update_health(day, latent_period, infectious_period)
    register_infectious_hosts(day, places, people)

    n_strains = transmission.diseases.get_number_of_diseases()
    for place in places:
        rng = get_place_rng(rngs, place.place_id)
        for strain in range(n_strains):
            transmission.spread_infection(day, strain, place, rng)


# ═══════════════════════════════════════════════════════════════════════
# SIMULATION
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class SimulationResult:
    """Daily per-strain time series from run_simulation().

    All daily arrays have shape (n_days, n_strains).
    """
    n_days: int = 0
    n_strains: int = 0
    daily_new_host_infections: Optional[np.ndarray] = None
    daily_new_vector_infections: Optional[np.ndarray] = None
    daily_infectious_vectors: Optional[np.ndarray] = None
    daily_infectious_hosts: Optional[np.ndarray] = None

    @property
    def total_host_infections(self) -> np.ndarray:
        return self.daily_new_host_infections.sum(axis=0)

    @property
    def total_vector_infections(self) -> np.ndarray:
        return self.daily_new_vector_infections.sum(axis=0)


def run_simulation(
    config: SimulationConfig,
    places: Sequence[Place],
    people: Sequence[Person],
    n_days: Optional[int] = None,
) -> SimulationResult:
    """Run the day loop and record daily per-strain counts.

    Args:
        config: Validated simulation configuration.
        places: Places to simulate; place_id must be 0..len(places)-1.
        people: All hosts enrolled at those places.
        n_days: Days to run (defaults to simulation.n_days).

    Returns:
        SimulationResult with daily time series.
    """
    configure_logging(config.simulation.verbosity)
    n_days = config.simulation.n_days if n_days is None else n_days
    n_strains = len(config.disease.strains)
    transmission = build_model(config)
    rngs = create_rng_hierarchy(config.simulation.seed, n_places=len(places))

    new_hosts = np.zeros((n_days, n_strains), dtype=np.int64)
    new_vectors = np.zeros((n_days, n_strains), dtype=np.int64)
    inf_vectors = np.zeros((n_days, n_strains), dtype=np.int64)
    inf_hosts = np.zeros((n_days, n_strains), dtype=np.int64)

    logger.info("run_simulation: %d places, %d people, %d strains, %d days",
                len(places), len(people), n_strains, n_days)

    for day in range(n_days):
        vectors_before = sum(p.cumulative_vector_infections for p in places)
        run_day(
            day, places, people, transmission, rngs,
            config.disease.latent_period, config.disease.infectious_period,
        )
        vectors_after = sum(p.cumulative_vector_infections for p in places)
        if places:
            new_vectors[day] = vectors_after - vectors_before

        for person in people:
            for strain in range(n_strains):
                if person.exposure_day[strain] == day:
                    new_hosts[day, strain] += 1
                if person.is_infectious(strain):
                    inf_hosts[day, strain] += 1
        for place in places:
            inf_vectors[day] += place.infectious_vectors

        if new_hosts[day].any():
            logger.info("day %d: new host infections %s", day, new_hosts[day].tolist())

    return SimulationResult(
        n_days=n_days,
        n_strains=n_strains,
        daily_new_host_infections=new_hosts,
        daily_new_vector_infections=new_vectors,
        daily_infectious_vectors=inf_vectors,
        daily_infectious_hosts=inf_hosts,
    )
