"""Built-in sample trees used by the CLI and the test-suite."""

from __future__ import annotations

from typing import Callable, Dict, Tuple

from massprops.model import Body, Joint, KinematicTree, SpatialTransform, xtrans


def box_body(
    mass: float,
    size: Tuple[float, float, float],
    com: Tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> Body:
    lx, ly, lz = size
    ixx = (mass / 12.0) * (ly ** 2 + lz ** 2)
    iyy = (mass / 12.0) * (lx ** 2 + lz ** 2)
    izz = (mass / 12.0) * (lx ** 2 + ly ** 2)
    return Body(mass=mass, com=com, inertia=(ixx, 0.0, 0.0, iyy, 0.0, izz))


def rod_body(mass: float, radius: float, length: float) -> Body:
    """Solid cylinder along x, with its center of mass half-way along the rod."""

    axial = 0.5 * mass * radius ** 2
    transverse = (mass / 12.0) * (3 * radius ** 2 + length ** 2)
    return Body(
        mass=mass,
        com=(0.5 * length, 0.0, 0.0),
        inertia=(axial, 0.0, 0.0, transverse, 0.0, transverse),
    )


def double_pendulum() -> KinematicTree:
    tree = KinematicTree()
    tree.add_body(0, SpatialTransform.identity(), Joint.revolute((0.0, 1.0, 0.0)), rod_body(1.0, 0.02, 1.0), "link1")
    tree.add_body("link1", xtrans((1.0, 0.0, 0.0)), Joint.revolute((0.0, 1.0, 0.0)), rod_body(1.0, 0.02, 1.0), "link2")
    tree.add_body("link2", xtrans((1.0, 0.0, 0.0)), Joint.fixed(), Body(mass=0.1), "tip")
    return tree


def floating_arm() -> KinematicTree:
    tree = KinematicTree()
    tree.add_body(0, SpatialTransform.identity(), Joint.free(), box_body(10.0, (0.4, 0.3, 0.2)), "base")
    tree.add_body("base", xtrans((0.0, 0.0, 0.1)), Joint.revolute((0.0, 0.0, 1.0)), box_body(1.0, (0.1, 0.1, 0.1)), "shoulder")
    tree.add_body("shoulder", xtrans((0.0, 0.0, 0.05)), Joint.revolute((0.0, 1.0, 0.0)), rod_body(2.0, 0.03, 0.5), "upper_arm")
    tree.add_body("upper_arm", xtrans((0.5, 0.0, 0.0)), Joint.revolute((0.0, 1.0, 0.0)), rod_body(1.5, 0.03, 0.4), "forearm")
    tree.add_body("forearm", xtrans((0.4, 0.0, 0.0)), Joint.fixed(), box_body(0.5, (0.05, 0.1, 0.1)), "gripper")
    tree.add_body("base", xtrans((0.2, 0.0, 0.0)), Joint.fixed(), Body(mass=0.05), "imu")
    return tree


def gantry() -> KinematicTree:
    tree = KinematicTree()
    tree.add_body(
        0,
        SpatialTransform.identity(),
        Joint.from_axes((0.0, 0.0, 0.0, 1.0, 0.0, 0.0), (0.0, 0.0, 0.0, 0.0, 1.0, 0.0)),
        box_body(5.0, (0.3, 0.3, 0.1)),
        "carriage",
    )
    tree.add_body("carriage", SpatialTransform.identity(), Joint.prismatic((0.0, 0.0, 1.0)), box_body(1.0, (0.05, 0.05, 0.6), (0.0, 0.0, -0.3)), "spindle")
    return tree


SAMPLE_TREES: Dict[str, Callable[[], KinematicTree]] = {
    "double_pendulum": double_pendulum,
    "floating_arm": floating_arm,
    "gantry": gantry,
}
