from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Sequence, Tuple, Union

import numpy as np

from massprops.errors import TreeStructureError

from .spatial import SpatialInertia, SpatialTransform, motion_cross_matrix, xrot, xtrans

try:  # pragma: no cover - optional import for graph export only
    import networkx as nx
except ModuleNotFoundError:  # pragma: no cover
    nx = None  # type: ignore[assignment]


FIXED_BODY_DISCRIMINATOR = 2147483647
ROOT_NAME = "ROOT"

Axis = Tuple[float, float, float, float, float, float]


class BodyKind(Enum):
    MOVABLE = "movable"
    FIXED = "fixed"


@dataclass(slots=True, frozen=True)
class BodyId:
    """Identifier of a body, tagged with the table it lives in."""

    kind: BodyKind
    index: int

    @classmethod
    def movable(cls, index: int) -> "BodyId":
        return cls(BodyKind.MOVABLE, index)

    @classmethod
    def fixed(cls, index: int) -> "BodyId":
        return cls(BodyKind.FIXED, index)

    @classmethod
    def from_numeric(cls, numeric: int) -> "BodyId":
        if numeric >= FIXED_BODY_DISCRIMINATOR:
            return cls.fixed(numeric - FIXED_BODY_DISCRIMINATOR)
        return cls.movable(numeric)

    @property
    def is_fixed(self) -> bool:
        return self.kind is BodyKind.FIXED

    @property
    def numeric(self) -> int:
        """Flat id, with fixed bodies offset by :data:`FIXED_BODY_DISCRIMINATOR`."""

        if self.is_fixed:
            return FIXED_BODY_DISCRIMINATOR + self.index
        return self.index


BodyRef = Union[BodyId, int, str]


def _build_inertia_matrix(entries: Tuple[float, float, float, float, float, float]) -> np.ndarray:
    ixx, ixy, ixz, iyy, iyz, izz = entries
    return np.array(
        [
            [ixx, ixy, ixz],
            [ixy, iyy, iyz],
            [ixz, iyz, izz],
        ]
    )


@dataclass(slots=True, frozen=True)
class Body:
    mass: float = 0.0
    com: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    inertia: Tuple[float, float, float, float, float, float] = (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)  # ixx, ixy, ixz, iyy, iyz, izz about com
    is_virtual: bool = False

    @property
    def spatial_inertia(self) -> SpatialInertia:
        return SpatialInertia.from_mass_com_inertia(
            self.mass, self.com, _build_inertia_matrix(self.inertia)
        )


@dataclass(slots=True, frozen=True)
class Joint:
    """Ordered unit spatial axes, angular part first; no axes means a fixed joint."""

    axes: Tuple[Axis, ...] = ()

    @property
    def dof_count(self) -> int:
        return len(self.axes)

    def axis(self, index: int) -> np.ndarray:
        return np.asarray(self.axes[index], dtype=float)

    @classmethod
    def from_axes(cls, *axes: Sequence[float]) -> "Joint":
        normalized = []
        for axis in axes:
            values = tuple(float(a) for a in axis)
            if len(values) != 6:
                raise ValueError(f"Expected 6 components in joint axis, got {axis!r}")
            normalized.append(values)
        return cls(tuple(normalized))  # type: ignore[arg-type]

    @classmethod
    def revolute(cls, axis: Sequence[float]) -> "Joint":
        return cls.from_axes((*axis, 0.0, 0.0, 0.0))

    @classmethod
    def prismatic(cls, axis: Sequence[float]) -> "Joint":
        return cls.from_axes((0.0, 0.0, 0.0, *axis))

    @classmethod
    def fixed(cls) -> "Joint":
        return cls()

    @classmethod
    def free(cls) -> "Joint":
        """Six DOF: translations along x, y, z followed by z-y-x Euler rotations."""

        return cls.from_axes(
            (0.0, 0.0, 0.0, 1.0, 0.0, 0.0),
            (0.0, 0.0, 0.0, 0.0, 1.0, 0.0),
            (0.0, 0.0, 0.0, 0.0, 0.0, 1.0),
            (0.0, 0.0, 1.0, 0.0, 0.0, 0.0),
            (0.0, 1.0, 0.0, 0.0, 0.0, 0.0),
            (1.0, 0.0, 0.0, 0.0, 0.0, 0.0),
        )


def joint_transform(axis: np.ndarray, q: float) -> SpatialTransform:
    """Joint transform for a single screw axis displaced by ``q``."""

    X = xtrans(axis[3:] * q)
    if np.any(axis[:3]):
        X = xrot(q, axis[:3]) * X
    return X


@dataclass(slots=True)
class FixedBody:
    name: str
    movable_parent: int
    parent_transform: SpatialTransform
    body: Body


class KinematicTree:
    """Arena of bodies addressed by integer id.

    Body 0 is the root. Every movable body carries exactly one degree of
    freedom; joints with more axes are split into chains of virtual bodies
    when added. Parent ids are always smaller than child ids.
    """

    def __init__(self, gravity: Sequence[float] = (0.0, 0.0, -9.81)) -> None:
        self.gravity = np.asarray(gravity, dtype=float)
        self.bodies: List[Body] = [Body()]
        self.names: List[str] = [ROOT_NAME]
        self.parent: List[int] = [0]
        self.children: List[List[int]] = [[]]
        self.joints: List[Joint] = [Joint()]
        self.joint_frames: List[SpatialTransform] = [SpatialTransform.identity()]
        self.inertia: List[SpatialInertia] = [SpatialInertia.zero()]
        self.q_index: List[int] = [-1]
        self.fixed_bodies: List[FixedBody] = []
        self.dof_count = 0
        self._name_lookup: Dict[str, BodyId] = {ROOT_NAME: BodyId.movable(0)}

        self.X_lambda: List[SpatialTransform] = [SpatialTransform.identity()]
        self.X_base: List[SpatialTransform] = [SpatialTransform.identity()]
        self.v = np.zeros((1, 6))
        self.a = np.zeros((1, 6))

    @property
    def q_size(self) -> int:
        return self.dof_count

    @property
    def qdot_size(self) -> int:
        return self.dof_count

    @property
    def body_count(self) -> int:
        return len(self.bodies)

    def add_body(
        self,
        parent: BodyRef,
        joint_frame: SpatialTransform,
        joint: Joint,
        body: Body,
        name: str = "",
    ) -> BodyId:
        if name and name in self._name_lookup:
            raise ValueError(f"Body name {name!r} is already in use")
        parent_id = self.resolve(parent)
        if joint.dof_count == 0:
            return self._add_fixed_body(parent_id, joint_frame, body, name)

        if parent_id.is_fixed:
            fixed = self._fixed(parent_id)
            joint_frame = joint_frame * fixed.parent_transform
            parent_index = fixed.movable_parent
        else:
            parent_index = self._movable_index(parent_id)

        frame = joint_frame
        for axis in joint.axes[:-1]:
            parent_index = self._append_movable(
                parent_index, frame, Joint((axis,)), Body(is_virtual=True), ""
            )
            frame = SpatialTransform.identity()
        body_index = self._append_movable(parent_index, frame, Joint((joint.axes[-1],)), body, name)
        return BodyId.movable(body_index)

    def _append_movable(
        self, parent: int, frame: SpatialTransform, joint: Joint, body: Body, name: str
    ) -> int:
        body_index = len(self.bodies)
        if parent >= body_index:
            raise TreeStructureError(
                f"Parent id {parent} must be smaller than child id {body_index}"
            )
        self.bodies.append(body)
        self.names.append(name)
        self.parent.append(parent)
        self.children.append([])
        self.children[parent].append(body_index)
        self.joints.append(joint)
        self.joint_frames.append(frame)
        self.inertia.append(body.spatial_inertia)
        self.q_index.append(self.dof_count)
        self.dof_count += 1
        if name:
            self._name_lookup[name] = BodyId.movable(body_index)

        self.X_lambda.append(frame)
        self.X_base.append(frame * self.X_base[parent])
        self.v = np.vstack((self.v, np.zeros(6)))
        self.a = np.vstack((self.a, np.zeros(6)))
        return body_index

    def _add_fixed_body(
        self, parent_id: BodyId, frame: SpatialTransform, body: Body, name: str
    ) -> BodyId:
        if parent_id.is_fixed:
            parent_fixed = self._fixed(parent_id)
            movable = parent_fixed.movable_parent
            transform = frame * parent_fixed.parent_transform
        else:
            movable = self._movable_index(parent_id)
            transform = frame
        # Welded bodies contribute their inertia to the movable parent.
        self.inertia[movable] = self.inertia[movable] + transform.apply_transpose_inertia(
            body.spatial_inertia
        )
        self.fixed_bodies.append(FixedBody(name, movable, transform, body))
        fixed_id = BodyId.fixed(len(self.fixed_bodies) - 1)
        if name:
            self._name_lookup[name] = fixed_id
        return fixed_id

    def validate(self) -> None:
        """Check the parent/child invariants the traversals rely on."""

        for body_index in range(1, len(self.bodies)):
            parent = self.parent[body_index]
            if not 0 <= parent < body_index:
                raise TreeStructureError(
                    f"Parent id {parent} must be in [0, {body_index}) for body {body_index}"
                )
            if body_index not in self.children[parent]:
                raise TreeStructureError(
                    f"Body {body_index} is missing from the children of {parent}"
                )
        for index, fixed in enumerate(self.fixed_bodies):
            if not 0 <= fixed.movable_parent < len(self.bodies):
                raise TreeStructureError(
                    f"Fixed body {index} refers to unknown movable parent {fixed.movable_parent}"
                )

    def resolve(self, ref: BodyRef) -> BodyId:
        if isinstance(ref, BodyId):
            return ref
        if isinstance(ref, str):
            return self.body_id(ref)
        return BodyId.from_numeric(int(ref))

    def body_id(self, name: str) -> BodyId:
        try:
            return self._name_lookup[name]
        except KeyError:
            raise KeyError(f"Body {name!r} not found") from None

    def body_name(self, ref: BodyRef) -> str:
        body_id = self.resolve(ref)
        if body_id.is_fixed:
            return self._fixed(body_id).name
        return self.names[body_id.index]

    def is_virtual(self, body_index: int) -> bool:
        return self.bodies[body_index].is_virtual

    def parent_of(self, body_index: int) -> int:
        return self.parent[body_index]

    def children_of(self, body_index: int) -> Tuple[int, ...]:
        return tuple(self.children[body_index])

    def fixed_children_of(self, body_index: int) -> Iterator[Tuple[int, FixedBody]]:
        for index, fixed in enumerate(self.fixed_bodies):
            if fixed.movable_parent == body_index:
                yield index, fixed

    def descendants(self) -> Iterator[int]:
        """Depth-first traversal of the movable bodies starting at the root."""

        stack = [0]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(self.children[node]))

    def _movable_index(self, body_id: BodyId) -> int:
        if not 0 <= body_id.index < len(self.bodies):
            raise KeyError(f"Body {body_id.index} not found")
        return body_id.index

    def _fixed(self, body_id: BodyId) -> FixedBody:
        if not 0 <= body_id.index < len(self.fixed_bodies):
            raise KeyError(f"Fixed body {body_id.index} not found")
        return self.fixed_bodies[body_id.index]

    def _check_vector(self, label: str, values: Sequence[float] | None, size: int) -> np.ndarray:
        if values is None:
            return np.zeros(size)
        array = np.asarray(values, dtype=float).reshape(-1)
        if array.shape[0] != size:
            raise ValueError(f"{label} has {array.shape[0]} elements, expected {size}")
        return array

    def update_kinematics(
        self,
        q: Sequence[float],
        qdot: Sequence[float] | None = None,
        qddot: Sequence[float] | None = None,
    ) -> None:
        """Refresh body transforms, velocities and (optionally) accelerations."""

        q = self._check_vector("q", q, self.q_size)
        qdot = self._check_vector("qdot", qdot, self.qdot_size)
        if qddot is not None:
            qddot = self._check_vector("qddot", qddot, self.qdot_size)

        count = len(self.bodies)
        X_lambda = [SpatialTransform.identity()] * count
        X_base = [SpatialTransform.identity()] * count
        v = np.zeros((count, 6))
        a = np.zeros((count, 6))
        for body_index in range(1, count):
            parent = self.parent[body_index]
            axis = self.joints[body_index].axis(0)
            qi = self.q_index[body_index]
            X_lambda[body_index] = joint_transform(axis, q[qi]) * self.joint_frames[body_index]
            X_base[body_index] = X_lambda[body_index] * X_base[parent]
            v_joint = axis * qdot[qi]
            v[body_index] = X_lambda[body_index].apply(v[parent]) + v_joint
            if qddot is not None:
                a[body_index] = (
                    X_lambda[body_index].apply(a[parent])
                    + axis * qddot[qi]
                    + motion_cross_matrix(v[body_index]) @ v_joint
                )

        self.X_lambda = X_lambda
        self.X_base = X_base
        self.v = v
        if qddot is not None:
            self.a = a

    def base_transform(self, ref: BodyRef) -> SpatialTransform:
        """Transform from base coordinates into the body frame for the current state."""

        body_id = self.resolve(ref)
        if body_id.is_fixed:
            fixed = self._fixed(body_id)
            return fixed.parent_transform * self.X_base[fixed.movable_parent]
        return self.X_base[body_id.index]

    def body_to_base_coordinates(
        self, ref: BodyRef, point: Sequence[float] = (0.0, 0.0, 0.0)
    ) -> np.ndarray:
        X = self.base_transform(ref)
        return X.E.T @ np.asarray(point, dtype=float) + X.r

    def body_world_orientation(self, ref: BodyRef) -> np.ndarray:
        """Rotation taking base coordinates into body coordinates."""

        return self.base_transform(ref).E

    def point_velocity(
        self, ref: BodyRef, point: Sequence[float] = (0.0, 0.0, 0.0)
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Linear and angular velocity of a body-fixed point, in base coordinates."""

        body_id = self.resolve(ref)
        point = np.asarray(point, dtype=float)
        if body_id.is_fixed:
            fixed = self._fixed(body_id)
            X = fixed.parent_transform
            point = X.E.T @ point + X.r
            body_index = fixed.movable_parent
        else:
            body_index = body_id.index
        v = self.v[body_index]
        E = self.X_base[body_index].E
        linear = E.T @ (v[3:] + np.cross(v[:3], point))
        return linear, E.T @ v[:3]

    def point_acceleration(
        self, ref: BodyRef, point: Sequence[float] = (0.0, 0.0, 0.0)
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Linear and angular acceleration of a body-fixed point, in base coordinates.

        Uses the accelerations stored by the last :meth:`update_kinematics`
        call that was given ``qddot``. The linear part is the classical
        acceleration of the point and so includes the centripetal term.
        """

        body_id = self.resolve(ref)
        point = np.asarray(point, dtype=float)
        if body_id.is_fixed:
            fixed = self._fixed(body_id)
            X = fixed.parent_transform
            point = X.E.T @ point + X.r
            body_index = fixed.movable_parent
        else:
            body_index = self._movable_index(body_id)
        v = self.v[body_index]
        a = self.a[body_index]
        omega = v[:3]
        point_velocity = v[3:] + np.cross(omega, point)
        linear = a[3:] + np.cross(a[:3], point) + np.cross(omega, point_velocity)
        E = self.X_base[body_index].E
        return E.T @ linear, E.T @ a[:3]

    def to_networkx(self):
        """Convert the tree to a NetworkX `DiGraph` keyed by numeric body id."""

        if nx is None:  # pragma: no cover - depends on optional extra
            raise RuntimeError(
                "networkx is not available; install the graph dependencies."
            )
        graph = nx.DiGraph()
        for body_index, body in enumerate(self.bodies):
            graph.add_node(
                body_index,
                name=self.names[body_index],
                virtual=body.is_virtual,
                fixed=False,
            )
        for body_index in range(1, len(self.bodies)):
            graph.add_edge(
                self.parent[body_index],
                body_index,
                axis=self.joints[body_index].axes[0],
            )
        for index, fixed in enumerate(self.fixed_bodies):
            node = BodyId.fixed(index).numeric
            graph.add_node(node, name=fixed.name, virtual=False, fixed=True)
            graph.add_edge(fixed.movable_parent, node, axis=None)
        return graph
