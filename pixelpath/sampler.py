"""Trace sampling by trace ID ratio, configured from the environment."""

from __future__ import annotations

import enum
import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Union

TRACES_SAMPLER_KEY = "OTEL_TRACES_SAMPLER"
TRACES_SAMPLER_ARG_KEY = "OTEL_TRACES_SAMPLER_ARG"
SAMPLER_TRACE_ID_RATIO = "traceidratio"


class SamplingDecision(enum.Enum):
    DROP = 0
    RECORD_AND_SAMPLE = 1


class SamplerArgError(ValueError):
    """Raised for a bad sampler argument; ``fallback`` is the sampler to use instead."""

    def __init__(self, message: str, fallback: "Sampler") -> None:
        super().__init__(message)
        self.fallback = fallback


def _check_trace_id(trace_id: bytes) -> bytes:
    trace_id = bytes(trace_id)
    if len(trace_id) != 16:
        raise ValueError("trace ID must be 16 bytes long")
    return trace_id


@dataclass(frozen=True)
class AlwaysSampler:
    """Samples every trace."""

    description: str = "AlwaysOnSampler"

    def should_sample(self, trace_id: bytes) -> SamplingDecision:
        _check_trace_id(trace_id)
        return SamplingDecision.RECORD_AND_SAMPLE


@dataclass(frozen=True)
class TraceIdRatioSampler:
    """Samples traces whose ID falls below a fixed bound."""

    upper_bound: int
    description: str

    def should_sample(self, trace_id: bytes) -> SamplingDecision:
        trace_id = _check_trace_id(trace_id)
        value = int.from_bytes(trace_id[-8:], "big") >> 1
        if value < self.upper_bound:
            return SamplingDecision.RECORD_AND_SAMPLE
        return SamplingDecision.DROP


Sampler = Union[AlwaysSampler, TraceIdRatioSampler]


def _format_fraction(fraction: float) -> str:
    if math.isnan(fraction):
        return "NaN"
    if fraction == 0:
        return "0"
    return repr(fraction)


def trace_id_ratio_based(fraction: float) -> Sampler:
    """Return a sampler keeping about ``fraction`` of traces."""
    if fraction >= 1:
        return AlwaysSampler()
    if fraction <= 0:
        fraction = 0.0
    bound = 0 if math.isnan(fraction) else int(fraction * (1 << 63))
    return TraceIdRatioSampler(
        upper_bound=bound,
        description=f"traceIDRatioBased{{{_format_fraction(fraction)}}}",
    )


def parse_trace_id_ratio(arg: str) -> Sampler:
    """Parse a ratio argument; raise SamplerArgError when it is unusable."""
    try:
        if "_" in arg:
            raise ValueError(arg)
        value = float(arg)
    except ValueError:
        raise SamplerArgError(
            f'parsing sampler argument: invalid number "{arg}"',
            trace_id_ratio_based(1.0),
        ) from None
    if value < 0.0:
        raise SamplerArgError(
            "invalid trace ID ratio: less than 0.0", trace_id_ratio_based(0.0)
        )
    if value > 1.0:
        raise SamplerArgError(
            "invalid trace ID ratio: greater than 1.0", trace_id_ratio_based(1.0)
        )
    return trace_id_ratio_based(value)


def sampler_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[Sampler]:
    """Return the trace ID ratio sampler the environment asks for, if any."""
    env = os.environ if environ is None else environ

    name = env.get(TRACES_SAMPLER_KEY)
    if name is None or name.strip().lower() != SAMPLER_TRACE_ID_RATIO:
        return None

    arg = env.get(TRACES_SAMPLER_ARG_KEY)
    if arg is None:
        return trace_id_ratio_based(1.0)
    return parse_trace_id_ratio(arg.strip())