from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

import numpy as np

from massprops.model.tree import BodyId, KinematicTree

from .naming import dof_name, resolve_body_name

logger = logging.getLogger(__name__)


def dof_overview(tree: KinematicTree) -> str:
    """List every generalized coordinate as ``index: body_DOF``.

    Bodies without a unique name are still listed so that the indices stay
    contiguous; a warning is logged for each of them.
    """

    lines: List[str] = []
    q_index = 0
    for body_index in range(1, tree.body_count):
        name = resolve_body_name(tree, body_index)
        if not name:
            logger.warning("Body %d has no unique name in the DOF overview", body_index)
        for axis in tree.joints[body_index].axes:
            lines.append(f"{q_index:>3}: {name}_{dof_name(axis)}")
            q_index += 1
    return "".join(f"{line}\n" for line in lines)


def named_body_origins(tree: KinematicTree, q: Sequence[float] | None = None) -> str:
    """Base-frame origin of every named body at configuration ``q``.

    ``q`` defaults to the zero configuration. The kinematic state of the tree
    is refreshed at ``q`` with zero velocity.
    """

    if q is None:
        q = np.zeros(tree.q_size)
    tree.update_kinematics(q)

    lines: List[str] = []
    for body_index in range(tree.body_count):
        name = tree.body_name(body_index)
        if not name:
            logger.debug("Skipping unnamed body %d", body_index)
            continue
        position = tree.body_to_base_coordinates(body_index)
        lines.append(f"{name}({body_index}): {_format_vector(position)}")

    for fixed_index, fixed in enumerate(tree.fixed_bodies):
        body_id = BodyId.fixed(fixed_index)
        position = tree.body_to_base_coordinates(body_id)
        lines.append(f"{fixed.name}({fixed_index},{body_id.numeric}): {_format_vector(position)}")

    return "".join(f"{line}\n" for line in lines)


def _format_vector(values: Iterable[float]) -> str:
    # Adding 0.0 folds negative zero into zero.
    return " ".join(f"{float(value) + 0.0:g}" for value in values)
