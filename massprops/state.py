"""Generalized coordinate vectors for floating-base trees.

Positions are laid out as ``[x, y, z, qx, qy, qz, joints..., qw]`` (length
``n + 7``); velocities and accelerations as ``[linear(3), angular(3),
joints...]`` (length ``n + 6``). Quaternions are passed as ``(x, y, z, w)``.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from massprops.errors import GeneralizedVectorSizeError


def _as_vector(values: Sequence[float], size: int | None, label: str) -> np.ndarray:
    array = np.asarray(values, dtype=float).reshape(-1)
    if size is not None and array.shape[0] != size:
        raise ValueError(f"Expected {size} components in {label}, got {array.shape[0]}")
    return array


def _prepare_output(out: np.ndarray | None, expected: int, kind: str) -> np.ndarray:
    if out is None:
        return np.zeros(expected)
    if len(out) != expected:
        raise GeneralizedVectorSizeError(kind, expected, len(out))
    return out


def assemble_position(
    position: Sequence[float],
    orientation: Sequence[float],
    joints: Sequence[float],
    out: np.ndarray | None = None,
) -> np.ndarray:
    """Write the floating-base pose and joint values into ``out``.

    ``out`` must hold exactly ``len(joints) + 7`` elements; a new array is
    allocated when it is omitted. Nothing is written when a size is wrong.
    """

    position = _as_vector(position, 3, "base position")
    qx, qy, qz, qw = _as_vector(orientation, 4, "base orientation")
    joints = _as_vector(joints, None, "joint values")
    out = _prepare_output(out, joints.shape[0] + 7, "position")

    out[0:3] = position
    out[3:6] = (qx, qy, qz)
    out[6 : 6 + joints.shape[0]] = joints
    out[-1] = qw
    return out


def _assemble_motion(
    kind: str,
    linear: Sequence[float],
    angular: Sequence[float],
    joints: Sequence[float],
    out: np.ndarray | None,
) -> np.ndarray:
    linear = _as_vector(linear, 3, f"base linear {kind}")
    angular = _as_vector(angular, 3, f"base angular {kind}")
    joints = _as_vector(joints, None, f"joint {kind}")
    out = _prepare_output(out, joints.shape[0] + 6, kind)

    out[0:3] = linear
    out[3:6] = angular
    out[6 : 6 + joints.shape[0]] = joints
    return out


def assemble_velocity(
    linear: Sequence[float],
    angular: Sequence[float],
    joints: Sequence[float],
    out: np.ndarray | None = None,
) -> np.ndarray:
    return _assemble_motion("velocity", linear, angular, joints, out)


def assemble_acceleration(
    linear: Sequence[float],
    angular: Sequence[float],
    joints: Sequence[float],
    out: np.ndarray | None = None,
) -> np.ndarray:
    return _assemble_motion("acceleration", linear, angular, joints, out)


def split_position(state: Sequence[float]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Inverse of :func:`assemble_position`: ``(position, (x, y, z, w), joints)``."""

    state = _as_vector(state, None, "generalized position")
    if state.shape[0] < 7:
        raise GeneralizedVectorSizeError("position", 7, state.shape[0])
    orientation = np.append(state[3:6], state[-1])
    return state[0:3].copy(), orientation, state[6:-1].copy()


def split_velocity(state: Sequence[float]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Inverse of :func:`assemble_velocity`: ``(linear, angular, joints)``."""

    state = _as_vector(state, None, "generalized velocity")
    if state.shape[0] < 6:
        raise GeneralizedVectorSizeError("velocity", 6, state.shape[0])
    return state[0:3].copy(), state[3:6].copy(), state[6:].copy()
