import pytest

from pixelpath.gravity import (
    GRAVITY_TYPES,
    RESIZE_TYPES,
    GravityOptions,
    GravityType,
    ResizeType,
)

ALL_TYPES = [t for t in GravityType if t is not GravityType.UNKNOWN]


def _opts(kind):
    if kind is GravityType.FOCUS_POINT:
        return GravityOptions(kind, 0.25, 0.5)
    return GravityOptions(kind, 3.0, 5.0)


def test_codes_round_trip():
    for code, kind in GRAVITY_TYPES.items():
        assert str(kind) == code
    for code, kind in RESIZE_TYPES.items():
        assert str(kind) == code


def test_unknown_has_empty_code():
    default = GravityOptions()
    assert str(default.type) == ""
    north_west = GravityOptions(GravityType.NORTH_WEST, 1.0, 2.0)
    assert str(north_west.type) == "nowe"
    assert str(ResizeType.FILL_DOWN) == "fill-down"


def test_default_gravity_is_unknown():
    opts = GravityOptions()
    assert opts.type is GravityType.UNKNOWN
    assert (opts.x, opts.y) == (0.0, 0.0)


@pytest.mark.parametrize("kind", ALL_TYPES)
def test_four_quarter_turns_restore(kind):
    opts = _opts(kind)
    for _ in range(4):
        opts.rotate_and_flip(90, False)
    assert opts == _opts(kind)


@pytest.mark.parametrize("kind", ALL_TYPES)
def test_half_turn_twice_restores(kind):
    opts = _opts(kind)
    opts.rotate_and_flip(180, False)
    opts.rotate_and_flip(180, False)
    assert opts == _opts(kind)


@pytest.mark.parametrize("kind", ALL_TYPES)
def test_quarter_then_three_quarter_restores(kind):
    opts = _opts(kind)
    opts.rotate_and_flip(90, False)
    opts.rotate_and_flip(270, False)
    assert opts == _opts(kind)


@pytest.mark.parametrize("kind", ALL_TYPES)
def test_double_flip_restores(kind):
    opts = _opts(kind)
    opts.rotate_and_flip(0, True)
    opts.rotate_and_flip(0, True)
    assert opts == _opts(kind)


def test_flip_swaps_east_and_west():
    opts = GravityOptions(GravityType.EAST, 3.0, 5.0)
    opts.rotate_and_flip(0, True)
    assert opts == GravityOptions(GravityType.WEST, 3.0, 5.0)


def test_flip_mirrors_focus_point():
    opts = GravityOptions(GravityType.FOCUS_POINT, 0.25, 0.5)
    opts.rotate_and_flip(0, True)
    assert opts.type is GravityType.FOCUS_POINT
    assert opts.x == 0.75
    assert opts.y == 0.5


def test_quarter_turn_maps_north_to_west():
    opts = GravityOptions(GravityType.NORTH, 3.0, 5.0)
    opts.rotate_and_flip(90, False)
    assert opts.type is GravityType.WEST
    assert (opts.x, opts.y) == (5.0, -3.0)


def test_full_turn_and_negative_angle_do_nothing():
    for angle in (360, -90, 720):
        opts = GravityOptions(GravityType.SOUTH_EAST, 3.0, 5.0)
        opts.rotate_and_flip(angle, False)
        assert opts == GravityOptions(GravityType.SOUTH_EAST, 3.0, 5.0)


def test_angle_above_full_turn_is_reduced():
    a = GravityOptions(GravityType.NORTH_EAST, 3.0, 5.0)
    b = GravityOptions(GravityType.NORTH_EAST, 3.0, 5.0)
    a.rotate_and_flip(450, False)
    b.rotate_and_flip(90, False)
    assert a == b