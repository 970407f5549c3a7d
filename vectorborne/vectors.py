"""Vector population parameters.

Process-wide, strain-independent vector bionomics shared by every place.
Passed explicitly into the transmission model rather than read from a
global.
"""

from __future__ import annotations

from dataclasses import dataclass

from vectorborne.config import VectorSection


@dataclass(frozen=True)
class VectorParameters:
    """Bite-level vector parameters.

    infection_efficiency:    P(vector infected | one bite on an infectious host)
    transmission_efficiency: P(host infected | one bite by an infectious vector)
    bite_rate:               expected bites per vector per day
    incubation_period:       extrinsic incubation period (days), E → I vectors
    """
    infection_efficiency: float = 0.3
    transmission_efficiency: float = 0.3
    bite_rate: float = 0.76
    incubation_period: float = 11.0

    @classmethod
    def from_config(cls, cfg: VectorSection) -> "VectorParameters":
        return cls(
            infection_efficiency=cfg.infection_efficiency,
            transmission_efficiency=cfg.transmission_efficiency,
            bite_rate=cfg.bite_rate,
            incubation_period=cfg.incubation_period,
        )

    def get_infection_efficiency(self) -> float:
        return self.infection_efficiency

    def get_transmission_efficiency(self) -> float:
        return self.transmission_efficiency

    def get_bite_rate(self) -> float:
        return self.bite_rate

    def get_incubation_period(self) -> float:
        return self.incubation_period
