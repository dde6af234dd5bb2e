"""Gravity and resizing types used by processing options."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass


class GravityType(enum.Enum):
    """Where an image is anchored when it is cropped, extended or watermarked."""

    UNKNOWN = 0
    CENTER = 1
    NORTH = 2
    EAST = 3
    SOUTH = 4
    WEST = 5
    NORTH_WEST = 6
    NORTH_EAST = 7
    SOUTH_WEST = 8
    SOUTH_EAST = 9
    SMART = 10
    FOCUS_POINT = 11

    def __str__(self) -> str:
        return _GRAVITY_CODES.get(self, "")


GRAVITY_TYPES: dict[str, GravityType] = {
    "ce": GravityType.CENTER,
    "no": GravityType.NORTH,
    "ea": GravityType.EAST,
    "so": GravityType.SOUTH,
    "we": GravityType.WEST,
    "nowe": GravityType.NORTH_WEST,
    "noea": GravityType.NORTH_EAST,
    "sowe": GravityType.SOUTH_WEST,
    "soea": GravityType.SOUTH_EAST,
    "sm": GravityType.SMART,
    "fp": GravityType.FOCUS_POINT,
}

_GRAVITY_CODES = {value: code for code, value in GRAVITY_TYPES.items()}

_G = GravityType

_ROTATIONS: dict[int, dict[GravityType, GravityType]] = {
    90: {
        _G.NORTH: _G.WEST,
        _G.EAST: _G.NORTH,
        _G.SOUTH: _G.EAST,
        _G.WEST: _G.SOUTH,
        _G.NORTH_WEST: _G.SOUTH_WEST,
        _G.NORTH_EAST: _G.NORTH_WEST,
        _G.SOUTH_WEST: _G.SOUTH_EAST,
        _G.SOUTH_EAST: _G.NORTH_EAST,
    },
    180: {
        _G.NORTH: _G.SOUTH,
        _G.EAST: _G.WEST,
        _G.SOUTH: _G.NORTH,
        _G.WEST: _G.EAST,
        _G.NORTH_WEST: _G.SOUTH_EAST,
        _G.NORTH_EAST: _G.SOUTH_WEST,
        _G.SOUTH_WEST: _G.NORTH_EAST,
        _G.SOUTH_EAST: _G.NORTH_WEST,
    },
    270: {
        _G.NORTH: _G.EAST,
        _G.EAST: _G.SOUTH,
        _G.SOUTH: _G.WEST,
        _G.WEST: _G.NORTH,
        _G.NORTH_WEST: _G.NORTH_EAST,
        _G.NORTH_EAST: _G.SOUTH_EAST,
        _G.SOUTH_WEST: _G.NORTH_WEST,
        _G.SOUTH_EAST: _G.SOUTH_WEST,
    },
}

_FLIPS: dict[GravityType, GravityType] = {
    _G.EAST: _G.WEST,
    _G.WEST: _G.EAST,
    _G.NORTH_WEST: _G.NORTH_EAST,
    _G.NORTH_EAST: _G.NORTH_WEST,
    _G.SOUTH_WEST: _G.SOUTH_EAST,
    _G.SOUTH_EAST: _G.SOUTH_WEST,
}


class ResizeType(enum.Enum):
    """How an image is fitted into the requested size."""

    FIT = 0
    FILL = 1
    FILL_DOWN = 2
    FORCE = 3
    AUTO = 4

    def __str__(self) -> str:
        return _RESIZE_CODES.get(self, "")


RESIZE_TYPES: dict[str, ResizeType] = {
    "fit": ResizeType.FIT,
    "fill": ResizeType.FILL,
    "fill-down": ResizeType.FILL_DOWN,
    "force": ResizeType.FORCE,
    "auto": ResizeType.AUTO,
}

_RESIZE_CODES = {value: code for code, value in RESIZE_TYPES.items()}


@dataclass
class GravityOptions:
    """A gravity type together with its X and Y offsets."""

    type: GravityType = GravityType.UNKNOWN
    x: float = 0.0
    y: float = 0.0

    def rotate_and_flip(self, angle: int, flip: bool) -> None:
        """Adjust the gravity in place for an image flipped and then rotated."""
        # Remainder keeps the sign of the dividend, so negative angles do nothing.
        angle = int(math.fmod(angle, 360))

        if flip:
            self.type = _FLIPS.get(self.type, self.type)
            if self.type in (_G.CENTER, _G.NORTH, _G.SOUTH):
                self.x = -self.x
            elif self.type is _G.FOCUS_POINT:
                self.x = 1.0 - self.x

        if angle <= 0 or angle not in _ROTATIONS:
            return

        self.type = _ROTATIONS[angle].get(self.type, self.type)
        kind = self.type

        if angle == 90:
            if kind in (_G.CENTER, _G.EAST, _G.WEST):
                self.x, self.y = self.y, -self.x
            elif kind is _G.FOCUS_POINT:
                self.x, self.y = self.y, 1.0 - self.x
            else:
                self.x, self.y = self.y, self.x
        elif angle == 180:
            if kind is _G.CENTER:
                self.x, self.y = -self.x, -self.y
            elif kind in (_G.NORTH, _G.SOUTH):
                self.x = -self.x
            elif kind in (_G.EAST, _G.WEST):
                self.y = -self.y
            elif kind is _G.FOCUS_POINT:
                self.x, self.y = 1.0 - self.x, 1.0 - self.y
        else:
            if kind in (_G.CENTER, _G.NORTH, _G.SOUTH):
                self.x, self.y = -self.y, self.x
            elif kind is _G.FOCUS_POINT:
                self.x, self.y = 1.0 - self.y, self.x
            else:
                self.x, self.y = self.y, self.x