"""
Pytest configuration and common fixtures for corrga testing.

This file contains shared fixtures and configuration that can be used
across all test modules.
"""

import json
import logging
import shutil
import tempfile
from pathlib import Path

import cv2
import numpy as np
import pytest

# Add the project root to Python path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))


MARKERS = [
    "unit: fast isolated tests",
    "integration: tests exercising several components together",
    "slow: long running tests",
    "core: configuration, logging and exceptions",
    "config: configuration tests",
    "logging: logging tests",
    "exceptions: exception hierarchy tests",
    "genetic: genetic search tests",
    "data: image handling tests",
    "driver: interactive driver tests",
    "cli: command line tests",
    "utils: utility function tests",
]


def pytest_configure(config):
    for marker in MARKERS:
        config.addinivalue_line("markers", marker)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo any handler, filter or level changes a test makes to the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    filters = list(root.filters)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.filters[:] = filters
    root.setLevel(level)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CORRGA_* variables from the developer's shell out of the tests."""
    for name in ("CORRGA_SEED", "CORRGA_CAMERA_INDEX", "CORRGA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "search": {
            "population_size": 60,
            "crossover_rate": 0.5,
            "mutation_rate": 0.1,
            "generations": 20,
            "seed": 11
        },
        "viewer": {
            "camera_index": 1,
            "event_loop_delay_ms": 50
        },
        "output": {
            "history_dir": "test_history",
            "log_level": "DEBUG"
        }
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Create a temporary config file for testing."""
    config_path = temp_dir / "test_config.json"
    with open(config_path, 'w') as f:
        json.dump(sample_config_data, f, indent=2)
    return config_path


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing."""
    monkeypatch.setenv("CORRGA_SEED", "1234")
    monkeypatch.setenv("CORRGA_CAMERA_INDEX", "2")
    monkeypatch.setenv("CORRGA_LOG_LEVEL", "warning")


@pytest.fixture
def scene_image():
    """Deterministic textured grayscale image, 120 rows by 160 columns."""
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, size=(120, 160), dtype=np.uint8)


@pytest.fixture
def template_location():
    """(x, y, width, height) of the template cut from scene_image."""
    return 60, 40, 24, 16


@pytest.fixture
def scene_template(scene_image, template_location):
    x, y, width, height = template_location
    return scene_image[y:y + height, x:x + width].copy()


@pytest.fixture
def scene_files(temp_dir, scene_image, scene_template):
    """Scene and template written as PNG files."""
    image_path = temp_dir / "scene.png"
    template_path = temp_dir / "template.png"
    cv2.imwrite(str(image_path), scene_image)
    cv2.imwrite(str(template_path), scene_template)
    return image_path, template_path
