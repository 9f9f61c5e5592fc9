"""
Configuration constants for the BFS ring visualizer.

Scene geometry, the default graph, animation timing and colours live here.
Deployment settings are read from environment variables.
"""

from __future__ import annotations

import logging
import os

# =============================================================================
# Scene Geometry
# =============================================================================

SCENE_WIDTH = 1000
SCENE_HEIGHT = 700

# Nodes sit on a circle of this radius centred in the scene
RING_RADIUS = 120.0

# =============================================================================
# Graph Defaults
# =============================================================================

# Initial ring A-B-C-D-E-F-G-A
DEFAULT_RING_LABELS = ("A", "B", "C", "D", "E", "F", "G")

# Newly added nodes are always wired to this label when it exists
ANCHOR_LABEL = "A"

# =============================================================================
# Animation
# =============================================================================

# Delay between replayed trace events
STEP_DELAY_MS = 500

NODE_COLOR = "#ff4d4d"
NODE_BORDER_COLOR = "#00ffe1"
START_COLOR = "lime"
QUEUED_COLOR = "orange"
EDGE_COLOR = "darkgray"
PATH_COLOR = "#00ffcc"
BACKGROUND_COLOR = "#0d0d0d"

# =============================================================================
# Deployment
# =============================================================================

PORT = int(os.environ.get("PORT", 7860))
LOG_LEVEL = os.environ.get("RING_BFS_LOG_LEVEL", "INFO").upper()


def configure_logging(level: str | int | None = None) -> None:
    """Install a console handler; meant for entry points, not library code."""
    logging.basicConfig(
        level=level if level is not None else LOG_LEVEL,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
