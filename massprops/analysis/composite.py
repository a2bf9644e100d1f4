from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from massprops.errors import DegenerateMassError
from massprops.model.spatial import SpatialInertia, xtrans
from massprops.model.tree import KinematicTree

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CenterOfMass:
    mass: float
    com: np.ndarray
    com_velocity: Optional[np.ndarray] = None
    angular_momentum: Optional[np.ndarray] = None


class CompositeAccumulator:
    """Composite inertia ``Ic`` and momentum ``hc`` per body of one tree.

    The buffers are scratch state: they are resized and cleared at the start
    of every aggregation. An accumulator must not be shared between threads.
    """

    def __init__(self, tree: KinematicTree) -> None:
        self.tree = tree
        self.Ic: List[SpatialInertia] = []
        self.hc = np.zeros((0, 6))
        self.reset()

    def reset(self) -> None:
        count = self.tree.body_count
        self.Ic = [SpatialInertia.zero()] * count
        self.hc = np.zeros((count, 6))

    def center_of_mass(
        self,
        q: Sequence[float] | None,
        qdot: Sequence[float] | None,
        *,
        update_kinematics: bool = True,
        with_velocity: bool = False,
        with_angular_momentum: bool = False,
    ) -> CenterOfMass:
        """Aggregate the whole tree into its total mass and center of mass.

        Bodies are folded into their parents in decreasing id order, which is a
        valid leaf-to-root order because parent ids are always smaller than
        child ids. The velocity outputs are only filled in when requested.
        """

        tree = self.tree
        if update_kinematics:
            tree.update_kinematics(q, qdot)
        self.reset()

        count = tree.body_count
        for body_index in range(1, count):
            self.Ic[body_index] = tree.inertia[body_index]
            self.hc[body_index] = tree.inertia[body_index].apply(tree.v[body_index])

        total_inertia = SpatialInertia.zero()
        total_momentum = np.zeros(6)
        for body_index in range(count - 1, 0, -1):
            parent = tree.parent[body_index]
            X = tree.X_lambda[body_index]
            inertia = X.apply_transpose_inertia(self.Ic[body_index])
            momentum = X.apply_transpose(self.hc[body_index])
            if parent != 0:
                self.Ic[parent] = self.Ic[parent] + inertia
                self.hc[parent] += momentum
            else:
                total_inertia = total_inertia + inertia
                total_momentum += momentum

        mass = total_inertia.mass
        if not mass > 0.0:
            raise DegenerateMassError(mass)
        com = total_inertia.h / mass
        logger.debug("mass = %g com = %s htot = %s", mass, com, total_momentum)

        result = CenterOfMass(mass=mass, com=com)
        if with_velocity:
            result.com_velocity = total_momentum[3:] / mass
        if with_angular_momentum:
            result.angular_momentum = xtrans(com).apply_adjoint(total_momentum)[:3]
        return result


def compute_center_of_mass(
    tree: KinematicTree,
    q: Sequence[float] | None,
    qdot: Sequence[float] | None,
    *,
    update_kinematics: bool = True,
    with_velocity: bool = False,
    with_angular_momentum: bool = False,
) -> CenterOfMass:
    return CompositeAccumulator(tree).center_of_mass(
        q,
        qdot,
        update_kinematics=update_kinematics,
        with_velocity=with_velocity,
        with_angular_momentum=with_angular_momentum,
    )


def kinetic_energy(
    tree: KinematicTree,
    q: Sequence[float] | None,
    qdot: Sequence[float] | None,
    update_kinematics: bool = True,
) -> float:
    if update_kinematics:
        tree.update_kinematics(q, qdot)

    mass = sum(tree.inertia[body_index].mass for body_index in range(1, tree.body_count))
    if not mass > 0.0:
        raise DegenerateMassError(mass)

    result = 0.0
    for body_index in range(1, tree.body_count):
        v = tree.v[body_index]
        result += 0.5 * float(v @ tree.inertia[body_index].apply(v))
    return result


def potential_energy(
    tree: KinematicTree,
    q: Sequence[float] | None,
    update_kinematics: bool = True,
    accumulator: CompositeAccumulator | None = None,
) -> float:
    if accumulator is None:
        accumulator = CompositeAccumulator(tree)
    result = accumulator.center_of_mass(
        q, np.zeros(tree.qdot_size), update_kinematics=update_kinematics
    )
    logger.debug("pot_energy: mass = %g com = %s", result.mass, result.com)
    return result.mass * float(result.com @ -tree.gravity)
