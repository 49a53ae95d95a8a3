"""
Shared test fixtures for the paving engine tests.
"""
import sys
from pathlib import Path

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from paving_engine.contracts import CopingConfig, PoolPlacement, PoolSpec
from paving_engine.scene import ComponentType, SceneComponent


@pytest.fixture
def pool():
    """A 7000x3000mm rectangular pool, deep end at x = length."""
    return PoolSpec.rectangle(7000, 3000, pool_id="pool-1", name="Test 7x3")


@pytest.fixture
def coping_config():
    """400x400 coping, one row on sides and shallow end, two on the deep end."""
    return CopingConfig.from_option("400x400")


@pytest.fixture
def placement():
    """Pool placed at the world origin, unrotated, 1 unit per mm."""
    return PoolPlacement()


@pytest.fixture
def square_boundary():
    """A 2000x2000 square, open ring, clockwise on a Y-down canvas."""
    return [(0, 0), (2000, 0), (2000, 2000), (0, 2000)]


@pytest.fixture
def l_shaped_boundary():
    """An L-shaped area 3000 wide with a 1500x1500 notch at top-right."""
    return [(0, 0), (1500, 0), (1500, 1500), (3000, 1500), (3000, 3000), (0, 3000)]


def fence(component_id, start, length, rotation=0.0):
    """Linear fence component starting at ``start`` along ``rotation`` degrees."""
    return SceneComponent(
        id=component_id,
        type=ComponentType.FENCE,
        position=start,
        rotation=rotation,
        length=length,
    )


@pytest.fixture
def make_fence():
    return fence
