import numpy as np
import pytest

from massprops.samples import double_pendulum, floating_arm, gantry


def rot_y(angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


@pytest.fixture
def pendulum_tree():
    return double_pendulum()


@pytest.fixture
def floating_arm_tree():
    return floating_arm()


@pytest.fixture
def gantry_tree():
    return gantry()
