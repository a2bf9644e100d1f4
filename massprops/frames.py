"""Cartesian queries on bodies of a kinematic tree."""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from massprops.model.spatial import SpatialTransform
from massprops.model.tree import BodyId, KinematicTree


def spatial_velocity_to_vectors(
    velocity: Sequence[float], point: Sequence[float]
) -> Tuple[np.ndarray, np.ndarray]:
    """Split a spatial velocity into the linear velocity at ``point`` and the angular velocity."""

    velocity = np.asarray(velocity, dtype=float)
    angular = velocity[:3]
    linear = velocity[3:] - np.cross(np.asarray(point, dtype=float), angular)
    return linear, angular.copy()


def force_to_spatial_vector(point: Sequence[float], force: Sequence[float]) -> np.ndarray:
    force = np.asarray(force, dtype=float)
    return np.concatenate((np.cross(np.asarray(point, dtype=float), force), force))


def _homogeneous(rotation: np.ndarray, translation: np.ndarray) -> np.ndarray:
    result = np.eye(4)
    result[:3, :3] = rotation
    result[:3, 3] = translation
    return result


def body_to_base_transform(
    tree: KinematicTree,
    name: str,
    q: Sequence[float] | None = None,
    tip: Sequence[float] = (0.0, 0.0, 0.0),
    update: bool = True,
) -> np.ndarray:
    """Homogeneous pose of the body frame (moved to ``tip``) in base coordinates."""

    body_id = tree.body_id(name)
    if update:
        tree.update_kinematics(np.zeros(tree.q_size) if q is None else q)
    position = tree.body_to_base_coordinates(body_id, tip)
    rotation = tree.body_world_orientation(body_id).T
    return _homogeneous(rotation, position)


def body_transform(tree: KinematicTree, name: str) -> np.ndarray:
    """Homogeneous transform of a body relative to its parent, from the current state."""

    body_id = tree.body_id(name)
    transform: SpatialTransform
    if body_id.is_fixed:
        transform = tree.fixed_bodies[body_id.index].parent_transform
    else:
        transform = tree.X_lambda[body_id.index]
    return _homogeneous(transform.E.T, transform.r)


def parent_body_id(tree: KinematicTree, name: str) -> BodyId:
    body_id = tree.body_id(name)
    if body_id.is_fixed:
        return BodyId.movable(tree.fixed_bodies[body_id.index].movable_parent)
    return BodyId.movable(tree.parent_of(body_id.index))


def body_velocity(
    tree: KinematicTree, name: str, tip: Sequence[float] = (0.0, 0.0, 0.0)
) -> Tuple[np.ndarray, np.ndarray]:
    """Linear velocity of ``tip`` and angular velocity of the body, in base coordinates."""

    return tree.point_velocity(tree.body_id(name), tip)


def body_acceleration(
    tree: KinematicTree, name: str, tip: Sequence[float] = (0.0, 0.0, 0.0)
) -> Tuple[np.ndarray, np.ndarray]:
    """Linear acceleration of ``tip`` and angular acceleration of the body, in base coordinates.

    Call ``tree.update_kinematics`` with ``qddot`` first.
    """

    return tree.point_acceleration(tree.body_id(name), tip)
