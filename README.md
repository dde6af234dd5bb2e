# pixelpath

pixelpath turns image-processing URL paths into structured processing
options. It also holds the arithmetic that an image server needs to act
on those options: scale factors, crop sizes, gravity-based placement,
output format choice and quality reduction for byte limits.

It has no runtime dependencies.

## Installation

```
pip install pixelpath
```

To run the test suite:

```
pip install "pixelpath[test]"
pytest
```

## URL format

A path is a run of slash-separated options followed by the source URL:

```
/<option>:<arg>:<arg>/<option>:<arg>/<source>
```

The source is either base64url-encoded, with an optional `.<format>`
suffix, or written in plain form after the `plain` token, with an
optional `@<format>` suffix. A plain source may be percent-escaped.

```
/resize:fill:300:200/plain/http://images.example.com/cat.jpg@webp
/size:100:100/aHR0cDovL2ltYWdlcy5leGFtcGxlLmNvbS9jYXQuanBn.png
```

Options and their aliases:

| Option | Aliases |
| --- | --- |
| `resize` | `rs` |
| `size` | `s` |
| `resizing_type` (`fit`, `fill`, `fill-down`, `force`, `auto`) | `rt` |
| `width`, `height` | `w`, `h` |
| `min-width`, `min-height` | `mw`, `mh` |
| `zoom` | `z` |
| `dpr` | |
| `enlarge` | `el` |
| `extend` | `ex` |
| `extend_aspect_ratio` | `extend_ar`, `exar` |
| `gravity` (`ce`, `no`, `ea`, `so`, `we`, `nowe`, `noea`, `sowe`, `soea`, `sm`, `fp`) | `g` |
| `crop` | `c` |
| `trim` | `t` |
| `padding` | `pd` |
| `auto_rotate` | `ar` |
| `rotate` | `rot` |
| `background` | `bg` |
| `blur`, `sharpen`, `pixelate` | `bl`, `sh`, `pix` |
| `watermark` | `wm` |
| `strip_metadata`, `keep_copyright`, `strip_color_profile` | `sm`, `kcr`, `scp` |
| `enforce_thumbnail` | `eth` |
| `quality`, `format_quality`, `max_bytes` | `q`, `fq`, `mb` |
| `format` | `f`, `ext` |
| `skip_processing` | `skp` |
| `raw` | |
| `cachebuster` | `cb` |
| `expires` | `exp` |
| `filename` | `fn` |
| `return_attachment` | `att` |
| `preset` | `pr` |
| `max_src_resolution`, `max_src_file_size` | `msr`, `msfs` |
| `max_animation_frames`, `max_animation_frame_resolution` | `maf`, `mafr` |

The four `max_*` security options are accepted only when
`Config.allow_security_options` is true.

## Parsing a path

```python
from pixelpath.options import Config
from pixelpath.paths import parse_path

config = Config(enable_webp_detection=True)
po, source_url = parse_path(
    "/rs:fill:300:200/g:soea/plain/http://images.example.com/cat.jpg@webp",
    {"Accept": "image/webp"},
    config,
)
print(source_url)      # http://images.example.com/cat.jpg
print(po.width, po.height, po.resizing_type, po.format)
print(po.diff())       # only the options that differ from the defaults
```

`parse_path` returns a `ProcessingOptions` and the decoded source URL.
Any problem with the path, including an `expires` timestamp that has
already passed, raises `pixelpath.paths.InvalidURLError` (its
`status_code` is 404); the underlying `OptionsError` or
`ExpiredURLError` is kept as the exception's `__cause__`.

`Config` holds the settings that shape parsing: default quality and
per-format quality, metadata and colour-profile defaults,
`base_url` (prefixed to source URLs that lack it), `url_replacements`
(a list of `pixelpath.url.UrlReplacement`), WebP/AVIF detection and
enforcement from the `Accept` header, client hints (`DPR`/`Sec-CH-DPR`
and `Width`/`Sec-CH-Width` headers when `enable_client_hints` is set),
`only_presets`, and the default security limits.

Options can also be applied directly:

```python
from pixelpath.options import new_processing_options

po = new_processing_options()
po.apply_option("quality", ["55"])
po.apply_option("background", ["ffddee"])
print(po.effective_quality())   # 55
```

## Presets

Presets are named bundles of options, written as `name=option/option`:

```python
from pixelpath.options import Config
from pixelpath.paths import parse_path, parse_presets, validate_presets

config = Config()
parse_presets(config, [
    "thumb=resize:fill:150:150/sharpen:0.5",
    "# comment lines and blank lines are ignored",
])
validate_presets(config)

po, source_url = parse_path(
    "/preset:thumb/plain/http://images.example.com/cat.jpg", {}, config
)
```

A preset named `default` is applied to every request before the options
in the path. A preset used a second time within one request is skipped
with a logged warning. With `Config.only_presets` set, the first path
segment is a colon-separated list of preset names instead of options.

## Geometry helpers

`pixelpath.geometry` computes what the processing options mean for a
given source image:

- `calc_scale(width, height, po, image_type)` — horizontal and vertical
  scale plus the effective DPR scale.
- `calc_position(width, height, inner_width, inner_height, gravity, dpr, allow_overflow)`
  — where to place an inner box inside an outer one.
- `result_size(po, dpr_scale)`, `calc_crop_size(orig, crop)`,
  `orientation_meta(width, height, orientation, base_angle, use_orientation)`,
  `fill_down_size(...)`, `extend_aspect_ratio_size(...)` — size bookkeeping.
- `calc_jpeg_shrink(scale)` — the JPEG shrink-on-load factor (1, 2, 4 or 8).
- `find_best_format(preferred, animated, expect_alpha)`,
  `can_fit_to_bytes(image_type)` and `next_quality(quality, size, max_bytes)`
  — output format and quality selection.

## Other modules

- `pixelpath.gravity` — `GravityType`, `ResizeType` and `GravityOptions`,
  whose `rotate_and_flip(angle, flip)` adjusts a gravity for a rotated or
  mirrored image.
- `pixelpath.url` — `parse_url_options`, `decode_url` and
  `preprocess_url`: option splitting and source URL decoding.
- `pixelpath.stats` — `InProgressStats`, thread-safe counters of requests
  and images in progress, and `format_err_type` for error labels.
- `pixelpath.sampler` — trace-ID ratio sampling. `sampler_from_env()`
  reads `OTEL_TRACES_SAMPLER` and `OTEL_TRACES_SAMPLER_ARG` and returns a
  sampler, or `None` when ratio sampling is not requested; a bad argument
  raises `SamplerArgError`, whose `fallback` attribute holds the sampler
  to use instead.

## What it does not do

pixelpath only parses and computes. It does not download, decode,
resize or encode images, does not check URL signatures, runs no HTTP
server and sends no metrics anywhere. An application supplies those
parts and uses pixelpath to decide what to do.