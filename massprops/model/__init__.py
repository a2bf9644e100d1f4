"""Kinematic tree and spatial algebra used by the aggregation and report code."""

from .spatial import (
    SpatialInertia,
    SpatialTransform,
    cross_matrix,
    rotation_matrix,
    xrot,
    xtrans,
)
from .tree import (
    FIXED_BODY_DISCRIMINATOR,
    ROOT_NAME,
    Body,
    BodyId,
    BodyKind,
    FixedBody,
    Joint,
    KinematicTree,
)

__all__ = [
    "FIXED_BODY_DISCRIMINATOR",
    "ROOT_NAME",
    "Body",
    "BodyId",
    "BodyKind",
    "FixedBody",
    "Joint",
    "KinematicTree",
    "SpatialInertia",
    "SpatialTransform",
    "cross_matrix",
    "rotation_matrix",
    "xrot",
    "xtrans",
]
