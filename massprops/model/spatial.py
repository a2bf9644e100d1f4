"""Minimal spatial (6D) algebra in Featherstone's convention.

Motion and force vectors are stored angular part first: ``(wx, wy, wz, vx, vy, vz)``.
A :class:`SpatialTransform` ``X(E, r)`` maps motion vectors from a frame A into a
frame B whose origin sits at ``r`` (expressed in A) and whose orientation is the
coordinate rotation ``E``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np


def cross_matrix(vector: Sequence[float]) -> np.ndarray:
    x, y, z = vector
    return np.array(
        [
            [0.0, -z, y],
            [z, 0.0, -x],
            [-y, x, 0.0],
        ]
    )


def motion_cross_matrix(v: Sequence[float]) -> np.ndarray:
    """Return the 6x6 operator ``v x`` acting on motion vectors."""

    v = np.asarray(v, dtype=float)
    w = cross_matrix(v[:3])
    result = np.zeros((6, 6))
    result[:3, :3] = w
    result[3:, :3] = cross_matrix(v[3:])
    result[3:, 3:] = w
    return result


@dataclass(slots=True, frozen=True)
class SpatialTransform:
    E: np.ndarray
    r: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "E", np.asarray(self.E, dtype=float).reshape(3, 3))
        object.__setattr__(self, "r", np.asarray(self.r, dtype=float).reshape(3))

    @classmethod
    def identity(cls) -> "SpatialTransform":
        return cls(np.eye(3), np.zeros(3))

    def to_matrix(self) -> np.ndarray:
        result = np.zeros((6, 6))
        result[:3, :3] = self.E
        result[3:, :3] = -self.E @ cross_matrix(self.r)
        result[3:, 3:] = self.E
        return result

    def apply(self, motion: np.ndarray) -> np.ndarray:
        """Transform a motion vector into the target frame."""

        w = motion[:3]
        v = motion[3:]
        return np.concatenate((self.E @ w, self.E @ (v - np.cross(self.r, w))))

    def apply_transpose(self, force: np.ndarray) -> np.ndarray:
        """Transform a force (or momentum) vector back into the source frame."""

        e_t_f = self.E.T @ force[3:]
        return np.concatenate((self.E.T @ force[:3] + np.cross(self.r, e_t_f), e_t_f))

    def apply_adjoint(self, force: np.ndarray) -> np.ndarray:
        """Transform a force (or momentum) vector into the target frame."""

        n = force[:3]
        f = force[3:]
        return np.concatenate((self.E @ (n - np.cross(self.r, f)), self.E @ f))

    def apply_transpose_inertia(self, inertia: "SpatialInertia") -> "SpatialInertia":
        """Express a spatial inertia given in the target frame in the source frame."""

        X = self.to_matrix()
        return SpatialInertia.from_matrix(X.T @ inertia.to_matrix() @ X)

    def inverse(self) -> "SpatialTransform":
        return SpatialTransform(self.E.T, -self.E @ self.r)

    def __mul__(self, other: "SpatialTransform") -> "SpatialTransform":
        # (self * other) applies ``other`` first.
        return SpatialTransform(self.E @ other.E, other.r + other.E.T @ self.r)


def xtrans(r: Sequence[float]) -> SpatialTransform:
    return SpatialTransform(np.eye(3), r)


def xrot(angle: float, axis: Sequence[float]) -> SpatialTransform:
    """Pure rotation by ``angle`` about the unit ``axis``."""

    return SpatialTransform(rotation_matrix(axis, angle).T, np.zeros(3))


def rotation_matrix(axis: Sequence[float], angle: float) -> np.ndarray:
    axis = np.asarray(axis, dtype=float)
    norm = np.linalg.norm(axis)
    if norm == 0.0:
        return np.eye(3)
    K = cross_matrix(axis / norm)
    return np.eye(3) + np.sin(angle) * K + (1.0 - np.cos(angle)) * (K @ K)


@dataclass(slots=True, frozen=True)
class SpatialInertia:
    """Rigid-body spatial inertia about a frame origin.

    ``h`` is the first moment of mass (``mass * com``) and ``inertia`` the
    rotational inertia about the frame origin, not about the center of mass.
    """

    mass: float
    h: np.ndarray
    inertia: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "mass", float(self.mass))
        object.__setattr__(self, "h", np.asarray(self.h, dtype=float).reshape(3))
        object.__setattr__(self, "inertia", np.asarray(self.inertia, dtype=float).reshape(3, 3))

    @classmethod
    def zero(cls) -> "SpatialInertia":
        return cls(0.0, np.zeros(3), np.zeros((3, 3)))

    @classmethod
    def from_mass_com_inertia(
        cls,
        mass: float,
        com: Sequence[float],
        inertia_at_com: np.ndarray,
    ) -> "SpatialInertia":
        com = np.asarray(com, dtype=float)
        c = cross_matrix(com)
        return cls(mass, mass * com, np.asarray(inertia_at_com, dtype=float) - mass * (c @ c))

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> "SpatialInertia":
        h = np.array([matrix[2, 4], matrix[0, 5], matrix[1, 3]])
        return cls(matrix[3, 3], h, matrix[:3, :3])

    def to_matrix(self) -> np.ndarray:
        h = cross_matrix(self.h)
        result = np.zeros((6, 6))
        result[:3, :3] = self.inertia
        result[:3, 3:] = h
        result[3:, :3] = -h
        result[3:, 3:] = np.eye(3) * self.mass
        return result

    def apply(self, motion: np.ndarray) -> np.ndarray:
        """Return the momentum ``I v`` of a body moving with spatial velocity ``motion``."""

        return self.to_matrix() @ motion

    def __add__(self, other: "SpatialInertia") -> "SpatialInertia":
        return SpatialInertia(self.mass + other.mass, self.h + other.h, self.inertia + other.inertia)
