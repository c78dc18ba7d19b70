"""Centralized domain constants for board generation and entity turns.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

TOTAL_TILES = 36
"""Default tile budget for a generated board."""

MIN_GROUP_SIZE = 4
"""Default minimum tile count per group."""

MAX_GROUP_SIZE = 6
"""Default maximum tile count per group (inclusive)."""

MAX_GROUP_RETRIES = 100
"""Growth attempts allowed for a single group before generation fails."""

MIN_COUNTDOWN = 2
"""Lowest countdown a laser or bomb can be spawned or re-rolled with."""

MAX_COUNTDOWN = 6
"""Highest countdown a laser or bomb can be spawned or re-rolled with."""

ROBOT_COUNTDOWN = 1
"""The robot acts every round, so its countdown always resets to one."""

SPIKE_DIVISOR = 5
"""One spike is spawned per this many tiles at generation time."""

HAZARDS_PER_ROUND = 1
"""New lasers/bombs spawned after every entity round."""

DIFFICULTY_DECAY = 0.04
"""Exponential decay rate of the countdown curve per survived round."""

BOMB_RADIUS = 1
"""Chebyshev radius of a bomb blast (1 -> 3x3 square)."""

TILE_FACE_OFFSET = 0.085
"""World-space y offset between a tile's anchor point and its top-face center."""

ISO_HALF_WIDTH = 0.5
"""World units per lattice step along the projected x axis."""

ISO_HALF_HEIGHT = 0.25
"""World units per lattice step along the projected y axis."""

ISO_DEPTH = 0.05
"""World units of depth per lattice step (draw ordering)."""
