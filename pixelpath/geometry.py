"""Size, scale and placement arithmetic used when processing an image."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from pixelpath.gravity import GravityOptions, GravityType, ResizeType
from pixelpath.options import ImageType, ProcessingOptions

_NORTHERN = (GravityType.NORTH, GravityType.NORTH_EAST, GravityType.NORTH_WEST)
_EASTERN = (GravityType.EAST, GravityType.NORTH_EAST, GravityType.SOUTH_EAST)
_SOUTHERN = (GravityType.SOUTH, GravityType.SOUTH_EAST, GravityType.SOUTH_WEST)
_WESTERN = (GravityType.WEST, GravityType.NORTH_WEST, GravityType.SOUTH_WEST)

_FIT_TO_BYTES = (ImageType.JPEG, ImageType.WEBP, ImageType.AVIF, ImageType.TIFF)


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _scale(value: int, factor: float) -> int:
    if value == 0:
        return 0
    return _round_half_away(value * factor)


def _scale_to_even(value: int, factor: float) -> int:
    if value == 0:
        return 0
    return round(value * factor)


def _shrink(value: int, factor: float) -> int:
    if value == 0:
        return 0
    return _round_half_away(value / factor)


def _shrink_to_even(value: int, factor: float) -> int:
    if value == 0:
        return 0
    return round(value / factor)


def _min_non_zero(a: int, b: int) -> int:
    if a == 0:
        return b
    if b == 0:
        return a
    return min(a, b)


def calc_position(
    width: int,
    height: int,
    inner_width: int,
    inner_height: int,
    gravity: GravityOptions,
    dpr: float,
    allow_overflow: bool,
) -> tuple[int, int]:
    """Return ``(left, top)`` of an inner box placed in an outer box by gravity."""
    if gravity.type is GravityType.FOCUS_POINT:
        point_x = _scale_to_even(width, gravity.x)
        point_y = _scale_to_even(height, gravity.y)
        left = point_x - inner_width // 2
        top = point_y - inner_height // 2
    else:
        off_x = round(gravity.x * dpr)
        off_y = round(gravity.y * dpr)

        left = _shrink_to_even(width - inner_width + 1, 2) + off_x
        top = _shrink_to_even(height - inner_height + 1, 2) + off_y

        if gravity.type in _NORTHERN:
            top = off_y
        if gravity.type in _EASTERN:
            left = width - inner_width - off_x
        if gravity.type in _SOUTHERN:
            top = height - inner_height - off_y
        if gravity.type in _WESTERN:
            left = off_x

    if allow_overflow:
        min_x, max_x = -inner_width + 1, width - 1
        min_y, max_y = -inner_height + 1, height - 1
    else:
        min_x, max_x = 0, width - inner_width
        min_y, max_y = 0, height - inner_height

    left = max(min_x, min(left, max_x))
    top = max(min_y, min(top, max_y))
    return left, top


def result_size(po: ProcessingOptions, dpr_scale: float) -> tuple[int, int]:
    """The requested output size scaled by DPR and zoom."""
    return (
        _scale(po.width, dpr_scale * po.zoom_width),
        _scale(po.height, dpr_scale * po.zoom_height),
    )


def orientation_meta(
    width: int,
    height: int,
    orientation: int,
    base_angle: int,
    use_orientation: bool,
) -> tuple[int, int, int, bool]:
    """Return ``(width, height, angle, flip)`` after applying EXIF orientation."""
    angle = 0
    flip = False

    if use_orientation:
        if orientation in (3, 4):
            angle = 180
        if orientation in (5, 6):
            angle = 90
        if orientation in (7, 8):
            angle = 270
        if orientation in (2, 4, 5, 7):
            flip = True

    if math.fmod(angle + base_angle, 180) != 0:
        width, height = height, width

    return width, height, angle, flip


def calc_scale(
    width: int, height: int, po: ProcessingOptions, image_type: ImageType
) -> tuple[float, float, float]:
    """Return ``(width scale, height scale, DPR scale)`` for a source size."""
    src_w, src_h = float(width), float(height)
    dst_w = src_w if po.width == 0 else float(po.width)
    dst_h = src_h if po.height == 0 else float(po.height)

    wshrink = 1.0 if dst_w == src_w else src_w / dst_w
    hshrink = 1.0 if dst_h == src_h else src_h / dst_h

    if wshrink != 1 or hshrink != 1:
        rt = po.resizing_type

        if rt is ResizeType.AUTO:
            src_d = src_w - src_h
            dst_d = dst_w - dst_h
            if (src_d >= 0 and dst_d >= 0) or (src_d < 0 and dst_d < 0):
                rt = ResizeType.FILL
            else:
                rt = ResizeType.FIT

        if po.width == 0 and rt is not ResizeType.FORCE:
            wshrink = hshrink
        elif po.height == 0 and rt is not ResizeType.FORCE:
            hshrink = wshrink
        elif rt is ResizeType.FIT:
            wshrink = hshrink = max(wshrink, hshrink)
        elif rt in (ResizeType.FILL, ResizeType.FILL_DOWN):
            wshrink = hshrink = min(wshrink, hshrink)

    wshrink /= po.zoom_width
    hshrink /= po.zoom_height

    dpr_scale = po.dpr

    if not po.enlarge and image_type is not ImageType.SVG:
        min_shrink = min(wshrink, hshrink)
        if min_shrink < 1:
            wshrink /= min_shrink
            hshrink /= min_shrink
            if not po.extend.enabled:
                dpr_scale /= min_shrink
        dpr_scale = min(dpr_scale, min(wshrink, hshrink))

    if po.min_width > 0:
        min_shrink = src_w / po.min_width
        if min_shrink < wshrink:
            hshrink /= wshrink / min_shrink
            wshrink = min_shrink

    if po.min_height > 0:
        min_shrink = src_h / po.min_height
        if min_shrink < hshrink:
            wshrink /= hshrink / min_shrink
            hshrink = min_shrink

    wshrink /= dpr_scale
    hshrink /= dpr_scale

    wshrink = min(wshrink, src_w)
    hshrink = min(hshrink, src_h)

    return 1.0 / wshrink, 1.0 / hshrink, dpr_scale


def calc_crop_size(orig: int, crop: float) -> int:
    """Crop size in pixels: 0 means none, below 1 is a fraction of ``orig``."""
    if crop == 0.0:
        return 0
    if crop >= 1.0:
        return int(crop)
    return max(1, _scale(orig, crop))


def calc_jpeg_shrink(scale: float) -> int:
    """The JPEG shrink-on-load factor (1, 2, 4 or 8) for a downscale."""
    inverse = 1.0 / scale
    for factor in (8, 4, 2):
        if inverse >= factor:
            return factor
    return 1


def fill_down_size(
    result_width: int, result_height: int, img_width: int, img_height: int
) -> tuple[int, int]:
    """Shrink a fill-down result that exceeds the image, keeping its aspect ratio."""
    diff_w = result_width / img_width
    diff_h = result_height / img_height

    if diff_w > diff_h and diff_w > 1.0:
        return img_width, _scale(img_width, result_height / result_width)
    if diff_h > diff_w and diff_h > 1.0:
        return _scale(img_height, result_width / result_height), img_height
    return result_width, result_height


def extend_aspect_ratio_size(
    result_width: int, result_height: int, img_width: int, img_height: int
) -> tuple[int, int]:
    """The canvas size that gives the image the requested aspect ratio.

    When the image already has that ratio the image size itself is returned.
    """
    if result_width <= img_width or result_height <= img_height:
        return result_width, result_height

    diff_w = result_width / img_width
    diff_h = result_height / img_height

    if diff_h > diff_w:
        return img_width, _scale(img_width, result_height / result_width)
    if diff_w > diff_h:
        return _scale(img_height, result_width / result_height), img_height
    return img_width, img_height


def can_fit_to_bytes(image_type: ImageType) -> bool:
    """Whether quality can be lowered to meet a byte limit for this format."""
    return image_type in _FIT_TO_BYTES


def find_best_format(
    preferred: Sequence[ImageType], animated: bool, expect_alpha: bool
) -> ImageType:
    """The first preferred format that keeps animation and alpha as needed."""
    if not preferred:
        raise ValueError("No preferred formats specified")
    for image_type in preferred:
        if animated and not image_type.supports_animation:
            continue
        if expect_alpha and not image_type.supports_alpha:
            continue
        return image_type
    return preferred[0]


def next_quality(quality: int, size: int, max_bytes: int) -> int:
    """The lower quality to try after an encoding of ``size`` bytes was too big."""
    if max_bytes <= 0:
        raise ValueError("max_bytes must be positive")
    delta = size / max_bytes
    if delta > 3:
        factor = 0.25
    elif delta > 1.5:
        factor = 0.5
    else:
        factor = 0.75
    return int(quality * factor)


__all__ = [
    "calc_crop_size",
    "calc_jpeg_shrink",
    "calc_position",
    "calc_scale",
    "can_fit_to_bytes",
    "extend_aspect_ratio_size",
    "fill_down_size",
    "find_best_format",
    "next_quality",
    "orientation_meta",
    "result_size",
]