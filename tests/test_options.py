import base64

import pytest

from pixelpath.gravity import GravityType, ResizeType
from pixelpath.options import (
    Color,
    Config,
    ExpiredURLError,
    ImageType,
    color_from_hex,
    new_processing_options,
)
from pixelpath.url import OptionsError, UrlOption


@pytest.fixture
def po():
    return new_processing_options(Config())


def test_defaults(po):
    assert po.resizing_type is ResizeType.FIT
    assert po.gravity.type is GravityType.CENTER
    assert po.extend.gravity.type is GravityType.CENTER
    assert po.crop.gravity.type is GravityType.UNKNOWN
    assert po.background == Color(255, 255, 255)
    assert po.trim.threshold == 10
    assert po.trim.smart is True
    assert po.zoom_width == 1 and po.zoom_height == 1
    assert po.dpr == 1
    assert po.watermark.opacity == 1


def test_defaults_follow_config():
    config = Config(strip_metadata=False, quality=42, skip_processing_formats=[ImageType.GIF])
    po = new_processing_options(config)
    assert po.strip_metadata is False
    assert po.effective_quality() == 42
    assert po.skip_processing_formats == [ImageType.GIF]
    po.apply_option("skp", ["jpg"])
    assert config.skip_processing_formats == [ImageType.GIF]


def test_effective_quality_precedence():
    config = Config(quality=42, format_quality={})
    po = new_processing_options(config)
    po.apply_option("fq", ["webp", "70"])
    po.apply_option("format", ["webp"])
    assert po.effective_quality() == 70
    assert config.format_quality == {}
    po.apply_option("q", ["55"])
    assert po.effective_quality() == 55


def test_resize(po):
    po.apply_option("resize", ["fill", "100", "200", "1"])
    assert po.resizing_type is ResizeType.FILL
    assert po.width == 100
    assert po.height == 200
    assert po.enlarge is True


def test_size_with_extend(po):
    po.apply_option("s", ["100", "200", "", "1", "so", "10", "20"])
    assert po.width == 100
    assert po.height == 200
    assert po.enlarge is False
    assert po.extend.enabled is True
    assert po.extend.gravity.type is GravityType.SOUTH
    assert po.extend.gravity.x == 10.0
    assert po.extend.gravity.y == 20.0


def test_invalid_width(po):
    with pytest.raises(OptionsError, match="Invalid width: -1"):
        po.apply_option("w", ["-1"])
    with pytest.raises(OptionsError, match="Invalid width arguments"):
        po.apply_option("width", ["1", "2"])


def test_gravity_focus_point(po):
    po.apply_option("g", ["fp", "0.5", "0.75"])
    assert po.gravity.type is GravityType.FOCUS_POINT
    assert po.gravity.x == 0.5
    assert po.gravity.y == 0.75


def test_gravity_errors(po):
    with pytest.raises(OptionsError, match="Invalid gravity X: 1.5"):
        po.apply_option("g", ["fp", "1.5", "0.5"])
    with pytest.raises(OptionsError, match="Invalid gravity arguments"):
        po.apply_option("g", ["sm", "1"])
    with pytest.raises(OptionsError, match="Invalid gravity: xx"):
        po.apply_option("g", ["xx"])


def test_extend_rejects_smart(po):
    with pytest.raises(OptionsError, match="extend doesn't support smart gravity"):
        po.apply_option("ex", ["1", "sm"])


def test_padding(po):
    po.apply_option("pd", ["10"])
    assert (po.padding.top, po.padding.right, po.padding.bottom, po.padding.left) == (10, 10, 10, 10)
    po.apply_option("pd", ["10", "20"])
    assert po.padding.right == 20 and po.padding.left == 20
    po.apply_option("pd", ["0"])
    assert po.padding.enabled is False


def test_background(po):
    po.apply_option("background", ["128", "129", "130"])
    assert po.flatten is True
    assert po.background == Color(128, 129, 130)
    po.apply_option("bg", ["ffddee"])
    assert po.background == Color(0xFF, 0xDD, 0xEE)
    po.apply_option("bg", [""])
    assert po.flatten is False
    with pytest.raises(OptionsError, match="Invalid background red channel: 256"):
        po.apply_option("bg", ["256", "0", "0"])


def test_trim_with_color(po):
    po.apply_option("trim", ["5", "ff0000", "1", "0"])
    assert po.trim.enabled is True
    assert po.trim.threshold == 5
    assert po.trim.smart is False
    assert po.trim.color == Color(255, 0, 0)
    assert po.trim.equal_hor is True and po.trim.equal_ver is False


def test_rotate(po):
    po.apply_option("rot", ["90"])
    assert po.rotate == 90
    with pytest.raises(OptionsError, match="Invalid rotation angle: 45"):
        po.apply_option("rot", ["45"])


def test_quality_limits(po):
    with pytest.raises(OptionsError, match="Invalid quality: 101"):
        po.apply_option("q", ["101"])
    with pytest.raises(OptionsError, match="Missing quality for: webp"):
        po.apply_option("fq", ["jpg", "50", "webp"])


def test_watermark(po):
    po.apply_option("watermark", ["0.5", "soea", "10", "20", "0.6"])
    assert po.watermark.enabled is True
    assert po.watermark.gravity.type is GravityType.SOUTH_EAST
    assert po.watermark.gravity.x == 10.0
    assert po.watermark.gravity.y == 20.0
    assert po.watermark.scale == 0.6
    po.apply_option("wm", ["1", "re"])
    assert po.watermark.replicate is True
    with pytest.raises(OptionsError, match="Invalid watermark position: fp"):
        po.apply_option("wm", ["1", "fp"])


def test_filename_encoded(po):
    encoded = base64.urlsafe_b64encode(b"image.png").decode().rstrip("=")
    po.apply_option("fn", [encoded, "1"])
    assert po.filename == "image.png"
    with pytest.raises(OptionsError, match="Invalid filename encoding"):
        po.apply_option("fn", ["a+b=", "1"])


def test_expires(po):
    po.apply_option("exp", ["32503669200"])
    assert po.expires.timestamp() == 32503669200
    with pytest.raises(ExpiredURLError, match="Expired URL"):
        po.apply_option("exp", ["1609448400"])


def test_presets_and_recursion():
    config = Config(
        presets={
            "test1": [UrlOption("resizing_type", ["fill"]), UrlOption("preset", ["test1"])],
            "test2": [UrlOption("blur", ["0.2"]), UrlOption("quality", ["50"])],
        }
    )
    po = new_processing_options(config)
    po.apply_option("pr", ["test1", "test2", "test1"])
    assert po.used_presets == ["test1", "test2"]
    assert po.resizing_type is ResizeType.FILL
    assert po.blur == 0.2
    assert po.quality == 50
    with pytest.raises(OptionsError, match="Unknown preset: nope"):
        po.apply_option("pr", ["nope"])


def test_security_options():
    po = new_processing_options(Config())
    with pytest.raises(OptionsError, match="not allowed"):
        po.apply_option("msr", ["1"])
    allowed = new_processing_options(Config(allow_security_options=True))
    allowed.apply_option("msr", ["1"])
    assert allowed.security_options.max_src_resolution == 1000000
    with pytest.raises(OptionsError, match="Invalid max_animation_frames: 0"):
        allowed.apply_option("maf", ["0"])


def test_unknown_option(po):
    with pytest.raises(OptionsError, match="Unknown processing option: foo"):
        po.apply_option("foo", ["1"])


def test_invalid_bool_is_false(po):
    po.apply_option("el", ["1"])
    assert po.enlarge is True
    po.apply_option("el", ["yes"])
    assert po.enlarge is False


def test_skip_processing(po):
    po.apply_option("skp", ["jpg", "png"])
    assert po.skip_processing_formats == [ImageType.JPEG, ImageType.PNG]
    with pytest.raises(OptionsError) as exc:
        po.apply_option("skp", ["bad_format"])
    assert str(exc.value) == "Invalid image format in skip processing: bad_format"


def test_zoom(po):
    po.apply_option("z", ["0.5", "2"])
    assert po.zoom_width == 0.5
    assert po.zoom_height == 2.0
    with pytest.raises(OptionsError, match="Invalid zoom value"):
        po.apply_option("z", ["0"])


def test_diff(po):
    assert po.diff() == {}
    po.apply_option("w", ["100"])
    po.apply_option("g", ["no"])
    assert po.diff() == {"width": 100, "gravity": {"type": GravityType.NORTH}}


def test_apply_options_in_order(po):
    po.apply_options([UrlOption("w", ["100"]), UrlOption("w", ["150"])])
    assert po.width == 150


def test_color_from_hex():
    assert color_from_hex("fff") == Color(255, 255, 255)
    assert color_from_hex("ffddee") == Color(0xFF, 0xDD, 0xEE)
    with pytest.raises(ValueError):
        color_from_hex("ffff")


def test_image_type_names(po):
    assert po.format is ImageType.UNKNOWN
    assert str(po.format) == ""
    po.apply_option("format", ["png"])
    assert po.format is ImageType.PNG
    assert str(po.format) == "png"