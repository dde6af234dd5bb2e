"""Splitting of option segments and decoding of source image URLs."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import Iterable, Sequence
from urllib.parse import unquote

URL_TOKEN_PLAIN = "plain"


class OptionsError(ValueError):
    """Raised when processing options or a source URL cannot be parsed."""


@dataclass
class UrlOption:
    """One option segment: its name and its colon-separated arguments."""

    name: str
    args: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UrlReplacement:
    """A regular expression rewrite applied to source URLs.

    The replacement uses ``$1``, ``${1}``, ``$name``, ``${name}`` and ``$$``.
    """

    pattern: re.Pattern
    replacement: str

    def __post_init__(self) -> None:
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", re.compile(self.pattern))


_TEMPLATE_REF = re.compile(r"\$(?:(\$)|\{([A-Za-z0-9_]+)\}|([A-Za-z0-9_]+))")


def _expand(template: str, match: re.Match) -> str:
    def substitute(ref: re.Match) -> str:
        if ref.group(1):
            return "$"
        name = ref.group(2) or ref.group(3)
        if name.isdigit():
            index = int(name)
            if index > match.re.groups:
                return ""
            return match.group(index) or ""
        if name in match.re.groupindex:
            return match.group(name) or ""
        return ""

    return _TEMPLATE_REF.sub(substitute, template)


def parse_url_options(opts: Sequence[str]) -> tuple[list[UrlOption], list[str]]:
    """Split leading ``name:arg...`` segments from the remaining URL segments."""
    parsed: list[UrlOption] = []
    for index, opt in enumerate(opts):
        name, *args = opt.split(":")
        if not args:
            return parsed, list(opts[index:])
        parsed.append(UrlOption(name, args))
    return parsed, []


def preprocess_url(
    url: str, base_url: str = "", replacements: Iterable[UrlReplacement] = ()
) -> str:
    """Apply URL replacements and prefix the base URL where it is missing."""
    for repl in replacements:
        url = repl.pattern.sub(lambda m, t=repl.replacement: _expand(t, m), url)

    if not base_url or url.startswith(base_url):
        return url
    return base_url + url


_RAW_URLSAFE = re.compile(r"[A-Za-z0-9_-]*\Z")


def _decode_raw_urlsafe(data: str) -> bytes:
    if not _RAW_URLSAFE.match(data) or len(data) % 4 == 1:
        raise binascii.Error("illegal base64 data")
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _split_format(encoded: str, separator: str) -> tuple[str, str]:
    url_parts = encoded.split(separator)
    if not url_parts[0]:
        raise OptionsError("Image URL is empty")
    if len(url_parts) > 2:
        raise OptionsError(f"Multiple formats are specified: {encoded}")
    fmt = url_parts[1] if len(url_parts) == 2 else ""
    return url_parts[0], fmt


def _decode_base64_url(parts, base_url, replacements) -> tuple[str, str]:
    encoded = "".join(parts)
    body, fmt = _split_format(encoded, ".")
    try:
        raw = _decode_raw_urlsafe(body.rstrip("="))
    except binascii.Error:
        raise OptionsError(f"Invalid url encoding: {encoded}") from None
    url = raw.decode("utf-8", errors="replace")
    return preprocess_url(url, base_url, replacements), fmt


_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _decode_plain_url(parts, base_url, replacements) -> tuple[str, str]:
    encoded = "/".join(parts)
    body, fmt = _split_format(encoded, "@")
    if _BAD_ESCAPE.search(body):
        raise OptionsError(f"Invalid url encoding: {encoded}")
    return preprocess_url(unquote(body), base_url, replacements), fmt


def decode_url(
    parts: Sequence[str],
    base_url: str = "",
    replacements: Iterable[UrlReplacement] = (),
) -> tuple[str, str]:
    """Decode the source URL segments into ``(url, format extension)``."""
    if not parts:
        raise OptionsError("Image URL is empty")
    if parts[0] == URL_TOKEN_PLAIN and len(parts) > 1:
        return _decode_plain_url(parts[1:], base_url, replacements)
    return _decode_base64_url(parts, base_url, replacements)