from __future__ import annotations

from typing import Sequence

import numpy as np

from massprops.model.tree import BodyRef, KinematicTree

_CANONICAL_DOF_NAMES = ("RX", "RY", "RZ", "TX", "TY", "TZ")


def dof_name(axis: Sequence[float]) -> str:
    """Label a spatial joint axis, e.g. ``RZ`` for a pure rotation about z."""

    values = np.asarray(axis, dtype=float).reshape(-1)
    if values.shape[0] != 6:
        raise ValueError(f"Expected 6 components in joint axis, got {values.shape[0]}")
    nonzero = np.flatnonzero(values)
    if len(nonzero) == 1 and values[nonzero[0]] == 1.0:
        return _CANONICAL_DOF_NAMES[nonzero[0]]
    components = " ".join(np.format_float_positional(value, trim="-") for value in values)
    return f"custom({components})"


def resolve_body_name(tree: KinematicTree, ref: BodyRef) -> str:
    """Name of the real body a (possibly virtual) body stands for.

    Virtual bodies are followed through their single child. A virtual body
    with no child or several children has no unique name and yields ``""``.
    """

    body_id = tree.resolve(ref)
    if body_id.is_fixed:
        return tree.body_name(body_id)

    index = body_id.index
    while tree.is_virtual(index):
        children = tree.children_of(index)
        if len(children) != 1:
            return ""
        index = children[0]
    return tree.body_name(index)
