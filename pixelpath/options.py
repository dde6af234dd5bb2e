"""Processing options and how URL option segments change them."""

from __future__ import annotations

import base64
import binascii
import enum
import logging
import math
import re
import time
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Sequence

from pixelpath.gravity import (
    GRAVITY_TYPES,
    RESIZE_TYPES,
    GravityOptions,
    GravityType,
    ResizeType,
)
from pixelpath.url import OptionsError, UrlOption, UrlReplacement

log = logging.getLogger(__name__)


class ImageType(enum.Enum):
    """Image formats known to the option parser."""

    UNKNOWN = 0
    JPEG = 1
    PNG = 2
    WEBP = 3
    GIF = 4
    ICO = 5
    SVG = 6
    HEIC = 7
    AVIF = 8
    BMP = 9
    TIFF = 10

    def __str__(self) -> str:
        return "" if self is ImageType.UNKNOWN else self.name.lower()

    @property
    def supports_animation(self) -> bool:
        return self in (ImageType.GIF, ImageType.WEBP)

    @property
    def supports_alpha(self) -> bool:
        return self not in (ImageType.JPEG, ImageType.BMP)

    @property
    def supports_colour_profile(self) -> bool:
        return self in (ImageType.JPEG, ImageType.PNG, ImageType.WEBP, ImageType.AVIF)

    @property
    def supports_thumbnail(self) -> bool:
        return self in (ImageType.HEIC, ImageType.AVIF)


IMAGE_TYPES: dict[str, ImageType] = {
    "jpeg": ImageType.JPEG,
    "jpg": ImageType.JPEG,
    "png": ImageType.PNG,
    "webp": ImageType.WEBP,
    "gif": ImageType.GIF,
    "ico": ImageType.ICO,
    "svg": ImageType.SVG,
    "heic": ImageType.HEIC,
    "avif": ImageType.AVIF,
    "bmp": ImageType.BMP,
    "tiff": ImageType.TIFF,
}


@dataclass(frozen=True)
class Color:
    """An RGB colour with 8-bit channels."""

    r: int = 0
    g: int = 0
    b: int = 0


_HEX_COLOR = re.compile(r"(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})\Z")


def color_from_hex(value: str) -> Color:
    """Parse a 3- or 6-digit hex colour such as ``fff`` or ``ffddee``."""
    if not _HEX_COLOR.match(value):
        raise ValueError(f"Invalid hex color: {value}")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    return Color(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


@dataclass
class Config:
    """Settings that shape default options and how options are parsed."""

    quality: int = 80
    format_quality: dict = field(default_factory=lambda: {ImageType.AVIF: 65})
    strip_metadata: bool = True
    keep_copyright: bool = True
    strip_color_profile: bool = True
    auto_rotate: bool = True
    enforce_thumbnail: bool = False
    return_attachment: bool = False
    skip_processing_formats: list = field(default_factory=list)
    presets: dict = field(default_factory=dict)
    only_presets: bool = False
    base_url: str = ""
    url_replacements: list = field(default_factory=list)
    enable_webp_detection: bool = False
    enforce_webp: bool = False
    enable_avif_detection: bool = False
    enforce_avif: bool = False
    enable_client_hints: bool = False
    allow_security_options: bool = False
    max_src_resolution: int = 16800000
    max_src_file_size: int = 0
    max_animation_frames: int = 1
    max_animation_frame_resolution: int = 0
    preferred_formats: list = field(
        default_factory=lambda: [ImageType.JPEG, ImageType.PNG, ImageType.GIF]
    )


class ExpiredURLError(OptionsError):
    """Raised when the ``expires`` option lies in the past."""

    def __init__(self) -> None:
        super().__init__("Expired URL")


@dataclass
class ExtendOptions:
    enabled: bool = False
    gravity: GravityOptions = field(
        default_factory=lambda: GravityOptions(GravityType.CENTER)
    )


@dataclass
class CropOptions:
    width: float = 0.0
    height: float = 0.0
    gravity: GravityOptions = field(default_factory=GravityOptions)


@dataclass
class PaddingOptions:
    enabled: bool = False
    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0


@dataclass
class TrimOptions:
    enabled: bool = False
    threshold: float = 10.0
    smart: bool = True
    color: Color = field(default_factory=Color)
    equal_hor: bool = False
    equal_ver: bool = False


@dataclass
class WatermarkOptions:
    enabled: bool = False
    opacity: float = 1.0
    replicate: bool = False
    gravity: GravityOptions = field(
        default_factory=lambda: GravityOptions(GravityType.CENTER)
    )
    scale: float = 0.0


@dataclass
class SecurityOptions:
    max_src_resolution: int = 16800000
    max_src_file_size: int = 0
    max_animation_frames: int = 1
    max_animation_frame_resolution: int = 0

    @classmethod
    def from_config(cls, config: Config) -> "SecurityOptions":
        return cls(
            max_src_resolution=config.max_src_resolution,
            max_src_file_size=config.max_src_file_size,
            max_animation_frames=config.max_animation_frames,
            max_animation_frame_resolution=config.max_animation_frame_resolution,
        )


# --- value parsers mirroring the strict number syntax of the URL format ---

_INT = re.compile(r"[+-]?[0-9]+\Z")
_UINT = re.compile(r"[0-9]+\Z")
_DEC_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\Z")
_HEX_FLOAT = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+\Z"
)
_SPECIAL_FLOAT = re.compile(r"[+-]?(?:inf|infinity)\Z|nan\Z", re.IGNORECASE)
_INT64_MIN, _INT64_MAX = -(1 << 63), (1 << 63) - 1

_TRUE_WORDS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_WORDS = {"0", "f", "F", "FALSE", "false", "False"}


def _atoi(text: str) -> Optional[int]:
    if not _INT.match(text):
        return None
    value = int(text)
    return value if _INT64_MIN <= value <= _INT64_MAX else None


def _parse_uint8(text: str) -> Optional[int]:
    if not _UINT.match(text):
        return None
    value = int(text)
    return value if value <= 255 else None


def _parse_float(text: str) -> Optional[float]:
    if _SPECIAL_FLOAT.match(text):
        return float(text)
    if _HEX_FLOAT.match(text):
        value = float.fromhex(text)
    elif _DEC_FLOAT.match(text):
        value = float(text)
    else:
        return None
    return None if math.isinf(value) else value


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text not in _FALSE_WORDS:
        log.warning("`%s` is not a valid boolean value. Treated as false", text)
    return False


def _fmt(args: Sequence[str]) -> str:
    return "[" + " ".join(args) + "]"


def _decode_raw_urlsafe(data: str) -> bytes:
    if not re.fullmatch(r"[A-Za-z0-9_-]*", data) or len(data) % 4 == 1:
        raise binascii.Error("illegal base64 data")
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _dimension(name: str, arg: str) -> int:
    value = _atoi(arg)
    if value is None or value < 0:
        raise OptionsError(f"Invalid {name}: {arg}")
    return value


def _single(args: Sequence[str], name: str) -> str:
    if len(args) > 1:
        raise OptionsError(f"Invalid {name} arguments: {_fmt(args)}")
    return args[0]


def _offset_valid(gravity: GravityType, offset: float) -> bool:
    return gravity is not GravityType.FOCUS_POINT or 0 <= offset <= 1


def _parse_gravity(g: GravityOptions, args: Sequence[str]) -> None:
    n = len(args)
    if n > 3:
        raise OptionsError(f"Invalid gravity arguments: {_fmt(args)}")

    kind = GRAVITY_TYPES.get(args[0])
    if kind is None:
        raise OptionsError(f"Invalid gravity: {args[0]}")
    g.type = kind

    if (kind is GravityType.SMART and n > 1) or (
        kind is GravityType.FOCUS_POINT and n != 3
    ):
        raise OptionsError(f"Invalid gravity arguments: {_fmt(args)}")

    if n > 1:
        x = _parse_float(args[1])
        if x is None or not _offset_valid(kind, x):
            raise OptionsError(f"Invalid gravity X: {args[1]}")
        g.x = x

    if n > 2:
        y = _parse_float(args[2])
        if y is None or not _offset_valid(kind, y):
            raise OptionsError(f"Invalid gravity Y: {args[2]}")
        g.y = y


def _parse_extend(opts: ExtendOptions, name: str, args: Sequence[str]) -> None:
    if len(args) > 4:
        raise OptionsError(f"Invalid {name} arguments: {_fmt(args)}")

    opts.enabled = _parse_bool(args[0])

    if len(args) > 1:
        _parse_gravity(opts.gravity, args[1:])
        if opts.gravity.type is GravityType.SMART:
            raise OptionsError(f"{name} doesn't support smart gravity")


def _diff(base, current) -> dict:
    out = {}
    for f in fields(current):
        if not f.compare:
            continue
        old, new = getattr(base, f.name), getattr(current, f.name)
        if is_dataclass(new) and type(old) is type(new):
            nested = _diff(old, new)
            if nested:
                out[f.name] = nested
        elif old != new:
            out[f.name] = new
    return out


@dataclass
class ProcessingOptions:
    """Everything a request asks to be done to an image."""

    resizing_type: ResizeType = ResizeType.FIT
    width: int = 0
    height: int = 0
    min_width: int = 0
    min_height: int = 0
    zoom_width: float = 1.0
    zoom_height: float = 1.0
    dpr: float = 1.0
    gravity: GravityOptions = field(
        default_factory=lambda: GravityOptions(GravityType.CENTER)
    )
    enlarge: bool = False
    extend: ExtendOptions = field(default_factory=ExtendOptions)
    extend_aspect_ratio: ExtendOptions = field(default_factory=ExtendOptions)
    crop: CropOptions = field(default_factory=CropOptions)
    padding: PaddingOptions = field(default_factory=PaddingOptions)
    trim: TrimOptions = field(default_factory=TrimOptions)
    rotate: int = 0
    format: ImageType = ImageType.UNKNOWN
    quality: int = 0
    format_quality: dict = field(default_factory=dict)
    max_bytes: int = 0
    flatten: bool = False
    background: Color = field(default_factory=lambda: Color(255, 255, 255))
    blur: float = 0.0
    sharpen: float = 0.0
    pixelate: int = 0
    strip_metadata: bool = True
    keep_copyright: bool = True
    strip_color_profile: bool = True
    auto_rotate: bool = True
    enforce_thumbnail: bool = False
    skip_processing_formats: list = field(default_factory=list)
    cache_buster: str = ""
    expires: Optional[datetime] = None
    watermark: WatermarkOptions = field(default_factory=WatermarkOptions)
    prefer_webp: bool = False
    enforce_webp: bool = False
    prefer_avif: bool = False
    enforce_avif: bool = False
    filename: str = ""
    return_attachment: bool = False
    raw: bool = False
    used_presets: list = field(default_factory=list)
    security_options: SecurityOptions = field(default_factory=SecurityOptions)
    default_quality: int = field(default=80, compare=False)
    config: Config = field(default_factory=Config, repr=False, compare=False)

    def effective_quality(self) -> int:
        """The explicit quality, else the format's, else the configured default."""
        return (
            self.quality
            or self.format_quality.get(self.format, 0)
            or self.default_quality
        )

    def diff(self) -> dict:
        """Fields that differ from fresh defaults, nested objects as sub-dicts."""
        return _diff(new_processing_options(self.config), self)

    def __str__(self) -> str:
        return " ".join(f"{k}: {v}" for k, v in self.diff().items())

    def apply_option(self, name: str, args: Sequence[str]) -> None:
        """Apply one named option with its arguments; raise OptionsError if bad."""
        handler = _HANDLERS.get(name)
        if handler is None:
            raise OptionsError(f"Unknown processing option: {name}")
        handler(self, list(args))

    def apply_options(self, options: Iterable[UrlOption]) -> None:
        """Apply parsed option segments in order."""
        for opt in options:
            self.apply_option(opt.name, opt.args)

    # --- individual options ---

    def _apply_width(self, args):
        self.width = _dimension("width", _single(args, "width"))

    def _apply_height(self, args):
        self.height = _dimension("height", _single(args, "height"))

    def _apply_min_width(self, args):
        self.min_width = _dimension("min width", _single(args, "min width"))

    def _apply_min_height(self, args):
        self.min_height = _dimension(" min height", _single(args, "min height"))

    def _apply_enlarge(self, args):
        self.enlarge = _parse_bool(_single(args, "enlarge"))

    def _apply_extend(self, args):
        _parse_extend(self.extend, "extend", args)

    def _apply_extend_aspect_ratio(self, args):
        _parse_extend(self.extend_aspect_ratio, "extend_aspect_ratio", args)

    def _apply_size(self, args):
        if len(args) > 7:
            raise OptionsError(f"Invalid size arguments: {_fmt(args)}")
        if len(args) >= 1 and args[0]:
            self._apply_width(args[0:1])
        if len(args) >= 2 and args[1]:
            self._apply_height(args[1:2])
        if len(args) >= 3 and args[2]:
            self._apply_enlarge(args[2:3])
        if len(args) >= 4 and args[3]:
            self._apply_extend(args[3:])

    def _apply_resizing_type(self, args):
        arg = _single(args, "resizing type")
        kind = RESIZE_TYPES.get(arg)
        if kind is None:
            raise OptionsError(f"Invalid resize type: {arg}")
        self.resizing_type = kind

    def _apply_resize(self, args):
        if len(args) > 8:
            raise OptionsError(f"Invalid resize arguments: {_fmt(args)}")
        if args[0]:
            self._apply_resizing_type(args[0:1])
        if len(args) > 1:
            self._apply_size(args[1:])

    def _apply_zoom(self, args):
        if len(args) > 2:
            raise OptionsError(f"Invalid zoom arguments: {_fmt(args)}")
        z = _parse_float(args[0])
        if z is None or not z > 0:
            raise OptionsError(f"Invalid zoom value: {args[0]}")
        self.zoom_width = self.zoom_height = z
        if len(args) > 1:
            z = _parse_float(args[1])
            if z is None or not z > 0:
                raise OptionsError(f"Invalid zoom value: {args[0]}")
            self.zoom_height = z

    def _apply_dpr(self, args):
        arg = _single(args, "dpr")
        d = _parse_float(arg)
        if d is None or not d > 0:
            raise OptionsError(f"Invalid dpr: {arg}")
        self.dpr = d

    def _apply_gravity(self, args):
        _parse_gravity(self.gravity, args)

    def _apply_crop(self, args):
        if len(args) > 5:
            raise OptionsError(f"Invalid crop arguments: {_fmt(args)}")
        w = _parse_float(args[0])
        if w is None or not w >= 0:
            raise OptionsError(f"Invalid crop width: {args[0]}")
        self.crop.width = w
        if len(args) > 1:
            h = _parse_float(args[1])
            if h is None or not h >= 0:
                raise OptionsError(f"Invalid crop height: {args[1]}")
            self.crop.height = h
        if len(args) > 2:
            _parse_gravity(self.crop.gravity, args[2:])

    def _apply_padding(self, args):
        n = len(args)
        if n < 1 or n > 4:
            raise OptionsError(f"Invalid padding arguments: {_fmt(args)}")
        pad = self.padding
        pad.enabled = True
        if args[0]:
            pad.top = _dimension("padding top (+all)", args[0])
            pad.right = pad.bottom = pad.left = pad.top
        if n > 1 and args[1]:
            pad.right = _dimension("padding right (+left)", args[1])
            pad.left = pad.right
        if n > 2 and args[2]:
            pad.bottom = _dimension("padding bottom", args[2])
        if n > 3 and args[3]:
            pad.left = _dimension("padding left", args[3])
        if not (pad.top or pad.right or pad.bottom or pad.left):
            pad.enabled = False

    def _apply_trim(self, args):
        n = len(args)
        if n > 4:
            raise OptionsError(f"Invalid trim arguments: {_fmt(args)}")
        t = _parse_float(args[0])
        if t is None or not t >= 0:
            raise OptionsError(f"Invalid trim threshold: {args[0]}")
        self.trim.enabled = True
        self.trim.threshold = t
        if n > 1 and args[1]:
            try:
                self.trim.color = color_from_hex(args[1])
            except ValueError:
                raise OptionsError(f"Invalid trim color: {args[1]}") from None
            self.trim.smart = False
        if n > 2 and args[2]:
            self.trim.equal_hor = _parse_bool(args[2])
        if n > 3 and args[3]:
            self.trim.equal_ver = _parse_bool(args[3])

    def _apply_rotate(self, args):
        arg = _single(args, "rotate")
        r = _atoi(arg)
        if r is None or r % 90 != 0:
            raise OptionsError(f"Invalid rotation angle: {arg}")
        self.rotate = r

    def _apply_quality(self, args):
        arg = _single(args, "quality")
        q = _atoi(arg)
        if q is None or not 0 <= q <= 100:
            raise OptionsError(f"Invalid quality: {arg}")
        self.quality = q

    def _apply_format_quality(self, args):
        if len(args) % 2:
            raise OptionsError(f"Missing quality for: {args[-1]}")
        for fmt_name, q_text in zip(args[::2], args[1::2]):
            fmt = IMAGE_TYPES.get(fmt_name)
            if fmt is None:
                raise OptionsError(f"Invalid image format: {fmt_name}")
            q = _atoi(q_text)
            if q is None or not 0 <= q <= 100:
                raise OptionsError(f"Invalid quality for {fmt_name}: {q_text}")
            self.format_quality[fmt] = q

    def _apply_max_bytes(self, args):
        arg = _single(args, "max_bytes")
        value = _atoi(arg)
        if value is None or value < 0:
            raise OptionsError(f"Invalid max_bytes: {arg}")
        self.max_bytes = value

    def _apply_background(self, args):
        if len(args) == 1:
            if not args[0]:
                self.flatten = False
                return
            try:
                self.background = color_from_hex(args[0])
            except ValueError as err:
                raise OptionsError(f"Invalid background argument: {err}") from None
            self.flatten = True
        elif len(args) == 3:
            self.flatten = True
            channels = []
            for text, name in zip(args, ("red", "green", "blue")):
                value = _parse_uint8(text)
                if value is None:
                    raise OptionsError(f"Invalid background {name} channel: {text}")
                channels.append(value)
            self.background = Color(*channels)
        else:
            raise OptionsError(f"Invalid background arguments: {_fmt(args)}")

    def _apply_blur(self, args):
        arg = _single(args, "blur")
        b = _parse_float(arg)
        if b is None or not b >= 0:
            raise OptionsError(f"Invalid blur: {arg}")
        self.blur = b

    def _apply_sharpen(self, args):
        arg = _single(args, "sharpen")
        s = _parse_float(arg)
        if s is None or not s >= 0:
            raise OptionsError(f"Invalid sharpen: {arg}")
        self.sharpen = s

    def _apply_pixelate(self, args):
        arg = _single(args, "pixelate")
        p = _atoi(arg)
        if p is None or p < 0:
            raise OptionsError(f"Invalid pixelate: {arg}")
        self.pixelate = p

    def _apply_preset(self, args):
        for name in args:
            preset = self.config.presets.get(name)
            if preset is None:
                raise OptionsError(f"Unknown preset: {name}")
            if name in self.used_presets:
                log.warning("Recursive preset usage is detected: %s", name)
                continue
            self.used_presets.append(name)
            self.apply_options(preset)

    def _apply_watermark(self, args):
        if len(args) > 7:
            raise OptionsError(f"Invalid watermark arguments: {_fmt(args)}")
        o = _parse_float(args[0])
        if o is None or not 0 <= o <= 1:
            raise OptionsError(f"Invalid watermark opacity: {args[0]}")
        wm = self.watermark
        wm.enabled = o > 0
        wm.opacity = o

        if len(args) > 1 and args[1]:
            kind = GRAVITY_TYPES.get(args[1])
            if args[1] == "re":
                wm.replicate = True
            elif kind is not None and kind not in (
                GravityType.FOCUS_POINT,
                GravityType.SMART,
            ):
                wm.gravity.type = kind
            else:
                raise OptionsError(f"Invalid watermark position: {args[1]}")

        if len(args) > 2 and args[2]:
            x = _atoi(args[2])
            if x is None:
                raise OptionsError(f"Invalid watermark X offset: {args[2]}")
            wm.gravity.x = float(x)

        if len(args) > 3 and args[3]:
            y = _atoi(args[3])
            if y is None:
                raise OptionsError(f"Invalid watermark Y offset: {args[3]}")
            wm.gravity.y = float(y)

        if len(args) > 4 and args[4]:
            s = _parse_float(args[4])
            if s is None or not s >= 0:
                raise OptionsError(f"Invalid watermark scale: {args[4]}")
            wm.scale = s

    def _apply_format(self, args):
        arg = _single(args, "format")
        fmt = IMAGE_TYPES.get(arg)
        if fmt is None:
            raise OptionsError(f"Invalid image format: {arg}")
        self.format = fmt

    def _apply_cache_buster(self, args):
        self.cache_buster = _single(args, "cache buster")

    def _apply_skip_processing(self, args):
        for name in args:
            fmt = IMAGE_TYPES.get(name)
            if fmt is None:
                raise OptionsError(
                    f"Invalid image format in skip processing: {name}"
                )
            self.skip_processing_formats.append(fmt)

    def _apply_raw(self, args):
        self.raw = _parse_bool(_single(args, "return_attachment"))

    def _apply_filename(self, args):
        if len(args) > 2:
            raise OptionsError(f"Invalid filename arguments: {_fmt(args)}")
        self.filename = args[0]
        if len(args) > 1 and _parse_bool(args[1]):
            try:
                decoded = _decode_raw_urlsafe(self.filename)
            except binascii.Error as err:
                raise OptionsError(f"Invalid filename encoding: {err}") from None
            self.filename = decoded.decode("utf-8", errors="replace")

    def _apply_expires(self, args):
        arg = _single(args, "expires")
        timestamp = _atoi(arg)
        if timestamp is None:
            raise OptionsError(f"Invalid expires argument: {arg}")
        if 0 < timestamp < int(time.time()):
            raise ExpiredURLError()
        try:
            self.expires = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise OptionsError(f"Invalid expires argument: {arg}") from None

    def _apply_strip_metadata(self, args):
        self.strip_metadata = _parse_bool(_single(args, "strip metadata"))

    def _apply_keep_copyright(self, args):
        self.keep_copyright = _parse_bool(_single(args, "keep copyright"))

    def _apply_strip_color_profile(self, args):
        self.strip_color_profile = _parse_bool(_single(args, "strip color profile"))

    def _apply_auto_rotate(self, args):
        self.auto_rotate = _parse_bool(_single(args, "auto rotate"))

    def _apply_enforce_thumbnail(self, args):
        self.enforce_thumbnail = _parse_bool(_single(args, "enforce thumbnail"))

    def _apply_return_attachment(self, args):
        self.return_attachment = _parse_bool(_single(args, "return_attachment"))

    def _check_security_allowed(self):
        if not self.config.allow_security_options:
            raise OptionsError("Security processing options are not allowed")

    def _apply_max_src_resolution(self, args):
        self._check_security_allowed()
        arg = _single(args, "max_src_resolution")
        x = _parse_float(arg)
        if x is None or not x > 0 or math.isinf(x):
            raise OptionsError(f"Invalid max_src_resolution: {arg}")
        self.security_options.max_src_resolution = int(x * 1000000)

    def _apply_max_src_file_size(self, args):
        self._check_security_allowed()
        arg = _single(args, "max_src_file_size")
        x = _atoi(arg)
        if x is None:
            raise OptionsError(f"Invalid max_src_file_size: {arg}")
        self.security_options.max_src_file_size = x

    def _apply_max_animation_frames(self, args):
        self._check_security_allowed()
        arg = _single(args, "max_animation_frames")
        x = _atoi(arg)
        if x is None or x <= 0:
            raise OptionsError(f"Invalid max_animation_frames: {arg}")
        self.security_options.max_animation_frames = x

    def _apply_max_animation_frame_resolution(self, args):
        self._check_security_allowed()
        arg = _single(args, "max_animation_frame_resolution")
        x = _parse_float(arg)
        if x is None or math.isinf(x) or math.isnan(x):
            raise OptionsError(f"Invalid max_animation_frame_resolution: {arg}")
        self.security_options.max_animation_frame_resolution = int(x * 1000000)


_PO = ProcessingOptions

_HANDLER_NAMES: list[tuple[tuple[str, ...], Callable]] = [
    (("resize", "rs"), _PO._apply_resize),
    (("size", "s"), _PO._apply_size),
    (("resizing_type", "rt"), _PO._apply_resizing_type),
    (("width", "w"), _PO._apply_width),
    (("height", "h"), _PO._apply_height),
    (("min-width", "mw"), _PO._apply_min_width),
    (("min-height", "mh"), _PO._apply_min_height),
    (("zoom", "z"), _PO._apply_zoom),
    (("dpr",), _PO._apply_dpr),
    (("enlarge", "el"), _PO._apply_enlarge),
    (("extend", "ex"), _PO._apply_extend),
    (("extend_aspect_ratio", "extend_ar", "exar"), _PO._apply_extend_aspect_ratio),
    (("gravity", "g"), _PO._apply_gravity),
    (("crop", "c"), _PO._apply_crop),
    (("trim", "t"), _PO._apply_trim),
    (("padding", "pd"), _PO._apply_padding),
    (("auto_rotate", "ar"), _PO._apply_auto_rotate),
    (("rotate", "rot"), _PO._apply_rotate),
    (("background", "bg"), _PO._apply_background),
    (("blur", "bl"), _PO._apply_blur),
    (("sharpen", "sh"), _PO._apply_sharpen),
    (("pixelate", "pix"), _PO._apply_pixelate),
    (("watermark", "wm"), _PO._apply_watermark),
    (("strip_metadata", "sm"), _PO._apply_strip_metadata),
    (("keep_copyright", "kcr"), _PO._apply_keep_copyright),
    (("strip_color_profile", "scp"), _PO._apply_strip_color_profile),
    (("enforce_thumbnail", "eth"), _PO._apply_enforce_thumbnail),
    (("quality", "q"), _PO._apply_quality),
    (("format_quality", "fq"), _PO._apply_format_quality),
    (("max_bytes", "mb"), _PO._apply_max_bytes),
    (("format", "f", "ext"), _PO._apply_format),
    (("skip_processing", "skp"), _PO._apply_skip_processing),
    (("raw",), _PO._apply_raw),
    (("cachebuster", "cb"), _PO._apply_cache_buster),
    (("expires", "exp"), _PO._apply_expires),
    (("filename", "fn"), _PO._apply_filename),
    (("return_attachment", "att"), _PO._apply_return_attachment),
    (("preset", "pr"), _PO._apply_preset),
    (("max_src_resolution", "msr"), _PO._apply_max_src_resolution),
    (("max_src_file_size", "msfs"), _PO._apply_max_src_file_size),
    (("max_animation_frames", "maf"), _PO._apply_max_animation_frames),
    (
        ("max_animation_frame_resolution", "mafr"),
        _PO._apply_max_animation_frame_resolution,
    ),
]

_HANDLERS: dict[str, Callable] = {
    alias: handler for aliases, handler in _HANDLER_NAMES for alias in aliases
}


def new_processing_options(config: Optional[Config] = None) -> ProcessingOptions:
    """Build options holding the defaults that ``config`` sets."""
    config = Config() if config is None else config
    return ProcessingOptions(
        strip_metadata=config.strip_metadata,
        keep_copyright=config.keep_copyright,
        strip_color_profile=config.strip_color_profile,
        auto_rotate=config.auto_rotate,
        enforce_thumbnail=config.enforce_thumbnail,
        return_attachment=config.return_attachment,
        skip_processing_formats=list(config.skip_processing_formats),
        format_quality=dict(config.format_quality),
        security_options=SecurityOptions.from_config(config),
        default_quality=config.quality,
        config=config,
    )


__all__ = [
    "Color",
    "Config",
    "CropOptions",
    "ExpiredURLError",
    "ExtendOptions",
    "IMAGE_TYPES",
    "ImageType",
    "OptionsError",
    "PaddingOptions",
    "ProcessingOptions",
    "SecurityOptions",
    "TrimOptions",
    "UrlOption",
    "UrlReplacement",
    "WatermarkOptions",
    "color_from_hex",
    "new_processing_options",
]