"""Circular layout: labels evenly spaced on a ring, alphabetically."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from ..config import RING_RADIUS, SCENE_HEIGHT, SCENE_WIDTH


class LayoutAssigner:
    """Places labels on a circle of fixed radius centred in the canvas.

    Labels are sorted before placement, so the ring reorders itself
    alphabetically whenever the node set changes, whatever the order the
    nodes were added in.
    """

    def __init__(
        self,
        width: float = SCENE_WIDTH,
        height: float = SCENE_HEIGHT,
        radius: float = RING_RADIUS,
    ) -> None:
        self.width = width
        self.height = height
        self.radius = radius

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2.0, self.height / 2.0

    def assign(self, labels: Iterable[str]) -> dict[str, tuple[float, float]]:
        """Return ``{label: (x, y)}``; angle(i) = 2*pi*i / count."""
        keys = sorted(set(labels))
        if not keys:
            return {}
        cx, cy = self.center
        angles = 2 * np.pi * np.arange(len(keys)) / len(keys)
        xs = cx + self.radius * np.cos(angles)
        ys = cy + self.radius * np.sin(angles)
        return {
            label: (float(x), float(y))
            for label, x, y in zip(keys, xs, ys)
        }
