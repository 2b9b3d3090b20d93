"""
pytest configuration and shared fixtures for the color wheel test suite
"""

import math
import os

# Must be set before the first QApplication is created
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from colorwheelengine import PALETTE, angle_step


def point_on_wedge(index, size, radius_fraction=0.35, count=len(PALETTE)):
    """Point at the mid angle of wedge ``index``, ``radius_fraction * size`` from the center."""
    angle = (index + 0.5) * angle_step(count)
    r = radius_fraction * size
    return size / 2 + r * math.cos(angle), size / 2 + r * math.sin(angle)


def point_at_angle(angle, r, size):
    return size / 2 + r * math.cos(angle), size / 2 + r * math.sin(angle)


@pytest.fixture
def wedge_point():
    return point_on_wedge


@pytest.fixture
def angle_point():
    return point_at_angle
