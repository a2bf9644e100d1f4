"""Analysis routines for massprops."""

from .composite import (
    CenterOfMass,
    CompositeAccumulator,
    compute_center_of_mass,
    kinetic_energy,
    potential_energy,
)

__all__ = [
    "CenterOfMass",
    "CompositeAccumulator",
    "compute_center_of_mass",
    "kinetic_energy",
    "potential_energy",
]
