"""vectorborne: Stochastic vector-borne transmission at a single place.

Daily transmission of vector-borne pathogens (dengue, malaria) between
hosts and arthropod vectors co-located at one place:
  - Chao–Longini host → vector infection, shared across strains
  - Vector → host infection per strain with stochastic rounding
  - Proportional allocation of new vector infections across strains
  - Single concurrent infection (cross-strain immunity) for hosts
  - Independent, seeded per-place RNG streams for reproducibility
"""

__version__ = "0.1.0"
