import numpy as np
import pytest
from numpy.testing import assert_allclose

from massprops.analysis import CompositeAccumulator, compute_center_of_mass
from massprops.errors import DegenerateMassError
from massprops.model import Body, Joint, KinematicTree, SpatialTransform, xtrans

from conftest import rot_y


def _two_link_chain(m1: float, c1, m2: float, c2) -> KinematicTree:
    tree = KinematicTree()
    tree.add_body(0, SpatialTransform.identity(), Joint.revolute((0.0, 1.0, 0.0)), Body(mass=m1, com=c1, inertia=(0.01, 0.0, 0.0, 0.01, 0.0, 0.01)), "upper")
    tree.add_body("upper", xtrans((1.0, 0.0, 0.0)), Joint.revolute((0.0, 1.0, 0.0)), Body(mass=m2, com=c2, inertia=(0.02, 0.0, 0.0, 0.02, 0.0, 0.02)), "lower")
    return tree


def test_two_link_chain_com_is_mass_weighted_average():
    m1, c1 = 2.0, np.array([0.4, 0.0, 0.1])
    m2, c2 = 3.0, np.array([0.3, 0.05, 0.0])
    tree = _two_link_chain(m1, tuple(c1), m2, tuple(c2))
    rng = np.random.default_rng(3)
    for q in rng.uniform(-np.pi, np.pi, size=(5, 2)):
        result = compute_center_of_mass(tree, q, np.zeros(2))
        com1 = rot_y(q[0]) @ c1
        com2 = rot_y(q[0]) @ np.array([1.0, 0.0, 0.0]) + rot_y(q[0] + q[1]) @ c2
        assert result.mass == pytest.approx(m1 + m2)
        assert_allclose(result.com, (m1 * com1 + m2 * com2) / (m1 + m2), atol=1e-12)


@pytest.mark.parametrize("with_velocity", [False, True])
def test_single_body_com_at_identity(with_velocity):
    tree = KinematicTree()
    tree.add_body(0, SpatialTransform.identity(), Joint.revolute((0.0, 0.0, 1.0)), Body(mass=4.0, com=(0.2, -0.1, 0.3)), "body")
    result = compute_center_of_mass(
        tree, [0.0], [0.0], with_velocity=with_velocity, with_angular_momentum=with_velocity
    )
    assert result.mass == pytest.approx(4.0)
    assert_allclose(result.com, (0.2, -0.1, 0.3), atol=1e-12)
    assert (result.com_velocity is not None) == with_velocity
    assert (result.angular_momentum is not None) == with_velocity


@pytest.mark.parametrize("angle", [0.0, np.pi / 2])
def test_spinning_body_momentum(angle):
    tree = KinematicTree()
    tree.add_body(0, SpatialTransform.identity(), Joint.revolute((0.0, 0.0, 1.0)), Body(mass=2.0, com=(1.0, 0.0, 0.0), inertia=(1.0, 0.0, 0.0, 1.0, 0.0, 1.0)), "wheel")
    result = compute_center_of_mass(tree, [angle], [3.0], with_velocity=True, with_angular_momentum=True)
    c, s = np.cos(angle), np.sin(angle)
    assert_allclose(result.com, (c, s, 0.0), atol=1e-12)
    assert_allclose(result.com_velocity, (-3.0 * s, 3.0 * c, 0.0), atol=1e-12)
    assert_allclose(result.angular_momentum, (0.0, 0.0, 3.0), atol=1e-12)


def test_fixed_bodies_contribute_to_mass_and_com(pendulum_tree):
    q = np.array([0.3, -0.7])
    result = compute_center_of_mass(pendulum_tree, q, np.zeros(2))
    x = np.array([1.0, 0.0, 0.0])
    com1 = rot_y(q[0]) @ (0.5 * x)
    com2 = rot_y(q[0]) @ x + rot_y(q.sum()) @ (0.5 * x)
    tip = rot_y(q[0]) @ x + rot_y(q.sum()) @ x
    assert result.mass == pytest.approx(2.1)
    assert_allclose(result.com, (com1 + com2 + 0.1 * tip) / 2.1, atol=1e-12)


def test_result_independent_of_sibling_order():
    def build(order):
        tree = KinematicTree()
        hub = tree.add_body(0, SpatialTransform.identity(), Joint.revolute((0.0, 0.0, 1.0)), Body(mass=1.0), "hub")
        specs = {
            "left": (xtrans((0.0, 1.0, 0.0)), Body(mass=2.0, com=(0.1, 0.0, 0.0))),
            "right": (xtrans((0.0, -1.0, 0.0)), Body(mass=0.5, com=(0.0, 0.0, 0.2))),
        }
        for name in order:
            frame, body = specs[name]
            tree.add_body(hub, frame, Joint.revolute((1.0, 0.0, 0.0)), body, name)
        return tree

    q = {"hub": 0.4, "left": -0.3, "right": 1.1}
    qdot = {"hub": 0.5, "left": 2.0, "right": -1.0}
    results = []
    for order in (("left", "right"), ("right", "left")):
        tree = build(order)
        names = ["hub", *order]
        result = compute_center_of_mass(
            tree,
            [q[n] for n in names],
            [qdot[n] for n in names],
            with_velocity=True,
            with_angular_momentum=True,
        )
        results.append(result)
    first, second = results
    assert first.mass == pytest.approx(second.mass)
    assert_allclose(first.com, second.com, atol=1e-12)
    assert_allclose(first.com_velocity, second.com_velocity, atol=1e-12)
    assert_allclose(first.angular_momentum, second.angular_momentum, atol=1e-12)


def test_com_velocity_matches_finite_difference(floating_arm_tree):
    rng = np.random.default_rng(5)
    q = rng.uniform(-1.0, 1.0, size=floating_arm_tree.q_size)
    qdot = rng.uniform(-1.0, 1.0, size=floating_arm_tree.qdot_size)
    accumulator = CompositeAccumulator(floating_arm_tree)
    result = accumulator.center_of_mass(q, qdot, with_velocity=True)
    eps = 1e-6
    ahead = accumulator.center_of_mass(q + eps * qdot, qdot).com
    behind = accumulator.center_of_mass(q - eps * qdot, qdot).com
    assert_allclose(result.com_velocity, (ahead - behind) / (2 * eps), atol=1e-6)


def test_accumulator_without_kinematics_update_uses_current_state(pendulum_tree):
    pendulum_tree.update_kinematics([0.2, 0.1], [1.0, -1.0])
    accumulator = CompositeAccumulator(pendulum_tree)
    stale = accumulator.center_of_mass(None, None, update_kinematics=False, with_velocity=True)
    fresh = compute_center_of_mass(pendulum_tree, [0.2, 0.1], [1.0, -1.0], with_velocity=True)
    assert_allclose(stale.com, fresh.com)
    assert_allclose(stale.com_velocity, fresh.com_velocity)


def test_accumulator_follows_tree_growth(pendulum_tree):
    accumulator = CompositeAccumulator(pendulum_tree)
    pendulum_tree.add_body("link2", xtrans((1.0, 0.0, 0.0)), Joint.revolute((0.0, 1.0, 0.0)), Body(mass=1.0), "link3")
    result = accumulator.center_of_mass(np.zeros(3), np.zeros(3))
    assert result.mass == pytest.approx(3.1)
    assert len(accumulator.Ic) == pendulum_tree.body_count


def test_massless_tree_is_degenerate():
    tree = KinematicTree()
    tree.add_body(0, SpatialTransform.identity(), Joint.from_axes((1, 0, 0, 0, 0, 0), (0, 1, 0, 0, 0, 0)), Body(), "ghost")
    with pytest.raises(DegenerateMassError):
        compute_center_of_mass(tree, [0.0, 0.0], [0.0, 0.0])
    with pytest.raises(DegenerateMassError):
        compute_center_of_mass(KinematicTree(), [], [])


def test_size_mismatch_propagates(pendulum_tree):
    with pytest.raises(ValueError):
        compute_center_of_mass(pendulum_tree, [0.0], [0.0, 0.0])
