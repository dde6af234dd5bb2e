"""Presets and parsing of request paths into processing options."""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Optional, Sequence, Union

from pixelpath.gravity import RESIZE_TYPES
from pixelpath.options import (
    Config,
    ProcessingOptions,
    _atoi,
    _parse_float,
    new_processing_options,
)
from pixelpath.url import OptionsError, decode_url, parse_url_options

MAX_CLIENT_HINT_DPR = 8

HeaderValue = Union[str, Sequence[str]]


class InvalidURLError(OptionsError):
    """Raised when a request path cannot be turned into processing options."""

    status_code = 404
    public_message = "Invalid URL"


def parse_preset(config: Config, preset_str: str) -> None:
    """Parse one ``name=option/option`` line into ``config.presets``.

    Blank lines and lines starting with ``#`` are ignored.
    """
    preset_str = preset_str.strip(" ")
    if not preset_str or preset_str.startswith("#"):
        return

    parts = preset_str.split("=")
    if len(parts) != 2:
        raise OptionsError(f"Invalid preset string: {preset_str}")

    name = parts[0].strip(" ")
    if not name:
        raise OptionsError(f"Empty preset name: {preset_str}")

    value = parts[1].strip(" ")
    if not value:
        raise OptionsError(f"Empty preset value: {preset_str}")

    opts, rest = parse_url_options(value.split("/"))
    if rest:
        raise OptionsError(f"Invalid preset value: {preset_str}")

    config.presets[name] = opts


def parse_presets(config: Config, preset_strs: Iterable[str]) -> None:
    """Parse every preset line, stopping at the first bad one."""
    for preset_str in preset_strs:
        parse_preset(config, preset_str)


def validate_presets(config: Config) -> None:
    """Apply every preset to fresh options; raise OptionsError on the first failure."""
    for name, opts in config.presets.items():
        po = new_processing_options(config)
        try:
            po.apply_options(opts)
        except OptionsError as err:
            raise OptionsError(f"Error in preset `{name}`: {err}") from err


def _header(headers: Mapping[str, HeaderValue], name: str) -> str:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() != wanted:
            continue
        if isinstance(value, str):
            return value
        return value[0] if value else ""
    return ""


def _shrink(value: int, factor: float) -> int:
    if value == 0:
        return 0
    scaled = value / factor
    return int(math.copysign(math.floor(abs(scaled) + 0.5), scaled))


def default_processing_options(
    config: Config, headers: Optional[Mapping[str, HeaderValue]] = None
) -> ProcessingOptions:
    """Options from the configuration, request headers and the ``default`` preset."""
    headers = headers or {}
    po = new_processing_options(config)

    accept = _header(headers, "Accept")
    if "image/webp" in accept:
        po.prefer_webp = config.enable_webp_detection or config.enforce_webp
        po.enforce_webp = config.enforce_webp
    if "image/avif" in accept:
        po.prefer_avif = config.enable_avif_detection or config.enforce_avif
        po.enforce_avif = config.enforce_avif

    if config.enable_client_hints:
        header_dpr = _header(headers, "Sec-CH-DPR") or _header(headers, "DPR")
        if header_dpr:
            dpr = _parse_float(header_dpr)
            if dpr is not None and 0 < dpr <= MAX_CLIENT_HINT_DPR:
                po.dpr = dpr

        header_width = _header(headers, "Sec-CH-Width") or _header(headers, "Width")
        if header_width:
            width = _atoi(header_width)
            if width is not None:
                po.width = _shrink(width, po.dpr)

    if "default" in config.presets:
        po.apply_option("preset", ["default"])

    return po


def _finish(
    po: ProcessingOptions, url_parts: Sequence[str], config: Config
) -> tuple[ProcessingOptions, str]:
    url, extension = decode_url(url_parts, config.base_url, config.url_replacements)
    if not po.raw and extension:
        po.apply_option("format", [extension])
    return po, url


def _parse_path_options(parts, headers, config):
    if parts[0] in RESIZE_TYPES:
        raise InvalidURLError(
            "It looks like you're using the deprecated basic URL format"
        )
    po = default_processing_options(config, headers)
    options, url_parts = parse_url_options(parts)
    po.apply_options(options)
    return _finish(po, url_parts, config)


def _parse_path_presets(parts, headers, config):
    po = default_processing_options(config, headers)
    po.apply_option("preset", parts[0].split(":"))
    return _finish(po, parts[1:], config)


def parse_path(
    path: str,
    headers: Optional[Mapping[str, HeaderValue]] = None,
    config: Optional[Config] = None,
) -> tuple[ProcessingOptions, str]:
    """Parse a request path into ``(processing options, source image URL)``."""
    config = Config() if config is None else config

    if path in ("", "/"):
        raise InvalidURLError(f"Invalid path: {path}")

    parts = path.removeprefix("/").split("/")
    parse = _parse_path_presets if config.only_presets else _parse_path_options

    try:
        return parse(parts, headers, config)
    except OptionsError as err:
        raise InvalidURLError(str(err)) from err