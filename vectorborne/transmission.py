"""Vector transmission model — daily infection at a single place.

Implements the Chao–Longini two-population model:
  - Vectors:  p_v = 1 − (1 − ε_inf)^(b × H_inf / H)
              new vectors = trunc(p_v × V_S), split across strains by
              each strain's share of infectious hosts (truncated again)
  - Hosts:    p_h = 1 − (1 − ε_trans)^(b × V_inf / H)
              new hosts = stochastic_round(H × p_h), applied to a random
              permutation of enrollees
  - Cross-strain immunity: a host exposed to one strain becomes
    unsusceptible to every other tracked strain

where b is the bite rate, H the number of hosts at the place, H_inf the
infectious hosts (all strains), V_S the susceptible vectors and V_inf the
infectious vectors of the strain being spread.

Vector infections are truncated (biased low), host infections are
stochastically rounded (unbiased). Both are kept as-is.

Randomness: the vector stage draws nothing. The host stage draws one
uniform for rounding, then n − 1 uniforms for the shuffle, in that order.
"""

from __future__ import annotations

import logging

import numpy as np

from vectorborne.rng import fisher_yates_shuffle, stochastic_round
from vectorborne.types import (
    NO_SOURCE,
    DiseaseRegistry,
    LocationLike,
    VectorParametersLike,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════
# INFECTION PROBABILITIES
# ═══════════════════════════════════════════════════════════════════════

def vector_infection_probability(
    infection_efficiency: float,
    bite_rate: float,
    infectious_hosts: int,
    total_hosts: int,
) -> float:
    """Daily probability that one susceptible vector becomes infected.

    p = 1 − (1 − ε_inf)^(b × H_inf / H)

    Each vector takes, in expectation, b × H_inf / H bites on infectious
    hosts per day, each infecting it with probability ε_inf.
    """
    return 1.0 - (1.0 - infection_efficiency) ** (
        bite_rate * infectious_hosts / total_hosts
    )


def host_infection_probability(
    transmission_efficiency: float,
    bite_rate: float,
    infectious_vectors: int,
    total_hosts: int,
) -> float:
    """Daily probability that one host is infected by the place's vectors.

    p = 1 − (1 − ε_trans)^(b × V_inf / H)
    """
    return 1.0 - (1.0 - transmission_efficiency) ** (
        bite_rate * infectious_vectors / total_hosts
    )


def allocate_by_strain(total: int, infectious_hosts: np.ndarray) -> np.ndarray:
    """Split `total` new vector infections across strains.

    exposed[s] = trunc(total × H_inf[s] / Σ H_inf), so the allocation can
    sum to less than `total`.
    """
    n_infectious = int(infectious_hosts.sum())
    exposed = np.zeros(len(infectious_hosts), dtype=np.int64)
    if n_infectious == 0:
        return exposed
    for s in range(len(infectious_hosts)):
        exposed[s] = int(total * (float(infectious_hosts[s]) / float(n_infectious)))
    return exposed


# ═══════════════════════════════════════════════════════════════════════
# TRANSMISSION MODEL
# ═══════════════════════════════════════════════════════════════════════

class VectorTransmission:
    """Daily vector-borne transmission at one place.

    Shared configuration (strain registry, vector parameters) is injected
    at construction; randomness is passed per call so each place can use
    its own stream.
    """

    def __init__(self, diseases: DiseaseRegistry, vectors: VectorParametersLike):
        self.diseases = diseases
        self.vectors = vectors

    def spread_infection(
        self,
        day: int,
        strain: int,
        place: LocationLike,
        rng: np.random.Generator,
    ) -> None:
        """Run one day of transmission of `strain` at `place`.

        No-op when the strain has zero transmissibility or the place is
        closed (by schedule or by policy for this strain). The place's
        per-day state for `strain` is reset exactly once on every path
        past the strain lookup.

        Raises:
            KeyError: If `strain` is not in the registry (nothing is reset).
        """
        beta = self.diseases.get_disease(strain).get_transmissibility()
        try:
            if beta == 0.0 or not place.is_open(day) or not place.should_be_open(day, strain):
                logger.debug("spread_infection: day %d strain %d skipped at %r",
                             day, strain, place)
                return

            place.record_infectious_days(day)

            # vectors are infected once per place per day, for all strains
            if not place.have_vectors_been_infected_today():
                self.infect_vectors(day, place)

            self.infect_hosts(day, strain, place, rng)
        finally:
            place.reset_place_state(strain)

    def infect_vectors(self, day: int, place: LocationLike) -> None:
        """Infect susceptible vectors from the infectious hosts present.

        Strain-independent and deterministic; marks the place's vectors as
        infected today unless there is nothing to do.
        """
        susceptible_vectors = place.get_susceptible_vectors()
        if susceptible_vectors == 0:
            return

        # every host present counts: infectious, susceptible or neither
        total_hosts = place.get_size()

        n_strains = self.diseases.get_number_of_diseases()
        infectious_hosts = np.zeros(n_strains, dtype=np.int64)
        for s in range(n_strains):
            infectious_hosts[s] = place.get_number_of_infectious_people(s)
        total_infectious_hosts = int(infectious_hosts.sum())
        if total_infectious_hosts == 0 or total_hosts == 0:
            return

        logger.debug("infect_vectors: day %d susceptible_vectors %d total_inf_hosts %d",
                     day, susceptible_vectors, total_infectious_hosts)

        prob_infection = vector_infection_probability(
            self.vectors.get_infection_efficiency(),
            self.vectors.get_bite_rate(),
            total_infectious_hosts,
            total_hosts,
        )
        total_infections = int(prob_infection * susceptible_vectors)
        logger.debug("infect_vectors: total infections %d", total_infections)

        exposed = allocate_by_strain(total_infections, infectious_hosts)
        for s in range(n_strains):
            if exposed[s] > 0:
                place.expose_vectors(s, int(exposed[s]))
        place.mark_vectors_as_infected_today()
        logger.debug("infect_vectors: newly_infected_vectors %d", int(exposed.sum()))

    def infect_hosts(
        self,
        day: int,
        strain: int,
        place: LocationLike,
        rng: np.random.Generator,
    ) -> None:
        """Infect susceptible enrollees with `strain` from infectious vectors.

        The target count is drawn once; that many permutation slots are
        then visited. A slot holding an absent or non-susceptible host is
        used up without producing an infection.
        """
        hosts = place.get_enrollees()
        total_hosts = len(hosts)
        if total_hosts == 0:
            return

        infectious_vectors = place.get_infectious_vectors(strain)
        if infectious_vectors == 0:
            return

        transmission_efficiency = self.vectors.get_transmission_efficiency()
        if transmission_efficiency == 0.0:
            return

        prob_infection = host_infection_probability(
            transmission_efficiency,
            self.vectors.get_bite_rate(),
            infectious_vectors,
            total_hosts,
        )
        expected_infections = total_hosts * prob_infection
        max_exposed_hosts = stochastic_round(expected_infections, rng)
        logger.debug("infect_hosts: max_exposed_hosts[%d] = %d", strain, max_exposed_hosts)

        order = fisher_yates_shuffle(total_hosts, rng)

        n_strains = self.diseases.get_number_of_diseases()
        for j in range(min(max_exposed_hosts, total_hosts)):
            infectee = hosts[int(order[j])]
            infectee.update_schedule(day)
            if not infectee.is_present(day, place):
                continue
            logger.debug("selected host %d age %d", infectee.get_id(), infectee.get_age())
            if infectee.is_susceptible(strain):
                logger.debug("transmitting to host %d", infectee.get_id())
                infectee.become_exposed(strain, NO_SOURCE, place, day)
                # single concurrent infection: immune to every other strain
                for other in range(n_strains):
                    if other != strain:
                        infectee.become_unsusceptible(other)
            else:
                logger.debug("host %d not susceptible", infectee.get_id())
