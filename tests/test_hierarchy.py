import pytest

from massprops.errors import VirtualBodyFanOutError
from massprops.model import Body, Joint, KinematicTree, SpatialTransform
from massprops.reports import model_hierarchy


def test_floating_arm_hierarchy(floating_arm_tree):
    assert model_hierarchy(floating_arm_tree) == (
        "ROOT\n"
        "  base [ TX, TY, TZ, RZ, RY, RX ]\n"
        "    shoulder [ RZ ]\n"
        "      upper_arm [ RY ]\n"
        "        forearm [ RY ]\n"
        "          gripper [fixed]\n"
        "    imu [fixed]\n"
    )


def test_gantry_collapses_two_dof_joint(gantry_tree):
    assert model_hierarchy(gantry_tree) == (
        "ROOT\n"
        "  carriage [ TX, TY ]\n"
        "    spindle [ TZ ]\n"
    )


def test_siblings_keep_insertion_order():
    tree = KinematicTree()
    hub = tree.add_body(0, SpatialTransform.identity(), Joint.revolute((0.0, 0.0, 1.0)), Body(mass=1.0), "hub")
    tree.add_body(hub, SpatialTransform.identity(), Joint.revolute((1.0, 0.0, 0.0)), Body(mass=1.0), "b")
    tree.add_body(hub, SpatialTransform.identity(), Joint.free(), Body(mass=1.0), "a")
    tree.add_body(0, SpatialTransform.identity(), Joint.fixed(), Body(mass=1.0), "plate")
    assert model_hierarchy(tree) == (
        "ROOT\n"
        "  hub [ RZ ]\n"
        "    b [ RX ]\n"
        "    a [ TX, TY, TZ, RZ, RY, RX ]\n"
        "  plate [fixed]\n"
    )


def test_childless_virtual_chain_ends():
    tree = KinematicTree()
    tree.add_body(0, SpatialTransform.identity(), Joint.revolute((1.0, 0.0, 0.0)), Body(is_virtual=True))
    assert model_hierarchy(tree) == "ROOT\n   [ RX, end ]\n"


def test_virtual_fan_out_is_reported_with_children():
    tree = KinematicTree()
    tree.add_body(0, SpatialTransform.identity(), Joint.from_axes((0, 0, 0, 1, 0, 0), (0, 0, 0, 0, 1, 0)), Body(mass=1.0), "slider")
    tree.add_body(1, SpatialTransform.identity(), Joint.revolute((0.0, 0.0, 1.0)), Body(mass=1.0), "extra")

    with pytest.raises(VirtualBodyFanOutError) as excinfo:
        model_hierarchy(tree)

    error = excinfo.value
    assert error.body_id == 1
    assert error.children == ((2, "slider"), (3, "extra"))
    assert error.partial == "ROOT\n"
    message = str(error)
    assert "massless body with id 1" in message
    assert message.count("  id: ") == 2
