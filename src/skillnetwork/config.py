"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants
of the skill-network layout engine.

Why is this file needed?
------------------------
1. Abstraction: Simulation constants (repulsion, spring, damping...) live in
   one place instead of being scattered through the force code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (the bundled sample network) when the app is frozen.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    SAMPLE_NETWORK_PATH (str): Absolute path to the bundled sample response.
    ForceParameters: Tunable constants of one simulation tick.
"""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: config.py is in src/skillnetwork/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Paths
ASSETS_PATH: str = get_resource_path("assets")
SAMPLE_NETWORK_PATH: str = os.path.join(ASSETS_PATH, "sample_network.json")

# Logical viewport (the renderer scales this to the widget size)
VIEWPORT_WIDTH: float = 800.0
VIEWPORT_HEIGHT: float = 600.0
VIEWPORT_CENTER: tuple[float, float] = (VIEWPORT_WIDTH / 2, VIEWPORT_HEIGHT / 2)

# Initial placement: uniform disk around the viewport center
SEED_RADIUS: float = 200.0
DEFAULT_SEED: int = 0

# Force constants
REPULSION: float = 400.0
REST_LENGTH: float = 100.0
SPRING_STRENGTH: float = 0.05
CENTER_STRENGTH: float = 0.02
DAMPING: float = 0.9
MIN_DISTANCE: float = 1.0

# Smallest value accepted for radius / weight
EPSILON: float = 1e-3

# Display refresh (ms) -> ~60 Hz
FRAME_INTERVAL_MS: int = 16


@dataclass(frozen=True)
class ForceParameters:
    """Constants of one simulation tick. Defaults reproduce the skill view."""
    repulsion: float = REPULSION
    rest_length: float = REST_LENGTH
    spring_strength: float = SPRING_STRENGTH
    center_strength: float = CENTER_STRENGTH
    damping: float = DAMPING
    min_distance: float = MIN_DISTANCE

    def __post_init__(self) -> None:
        if not 0.0 <= self.damping < 1.0:
            raise ValueError(f"Damping must be in [0, 1), got {self.damping}.")
        if self.min_distance <= 0.0:
            raise ValueError(f"Minimum distance must be positive, got {self.min_distance}.")


if not os.path.exists(ASSETS_PATH):
    print(f"WARNING: Assets path not found at {ASSETS_PATH}")
