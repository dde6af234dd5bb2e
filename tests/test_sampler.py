import pytest

from pixelpath.sampler import (
    AlwaysSampler,
    SamplerArgError,
    SamplingDecision,
    TraceIdRatioSampler,
    parse_trace_id_ratio,
    sampler_from_env,
    trace_id_ratio_based,
)

ZERO_ID = bytes(16)
MAX_ID = b"\xff" * 16


def test_ratio_at_or_above_one_always_samples():
    sampler = trace_id_ratio_based(1.0)
    assert isinstance(sampler, AlwaysSampler)
    assert sampler.should_sample(MAX_ID) is SamplingDecision.RECORD_AND_SAMPLE


def test_half_ratio_bound():
    sampler = trace_id_ratio_based(0.5)
    assert isinstance(sampler, TraceIdRatioSampler)
    assert sampler.upper_bound == 1 << 62
    assert sampler.description == "traceIDRatioBased{0.5}"


def test_half_ratio_decisions():
    sampler = trace_id_ratio_based(0.5)
    assert sampler.should_sample(ZERO_ID) is SamplingDecision.RECORD_AND_SAMPLE
    assert sampler.should_sample(MAX_ID) is SamplingDecision.DROP


def test_zero_and_negative_ratio_drop_everything():
    for fraction in (0.0, -3.0):
        sampler = trace_id_ratio_based(fraction)
        assert sampler.upper_bound == 0
        assert sampler.should_sample(ZERO_ID) is SamplingDecision.DROP


def test_higher_ratio_samples_superset():
    ids = [bytes([i] * 16) for i in range(0, 256, 17)]
    low = trace_id_ratio_based(0.25)
    high = trace_id_ratio_based(0.75)
    for trace_id in ids:
        if low.should_sample(trace_id) is SamplingDecision.RECORD_AND_SAMPLE:
            assert high.should_sample(trace_id) is SamplingDecision.RECORD_AND_SAMPLE


def test_trace_id_length_checked():
    with pytest.raises(ValueError):
        trace_id_ratio_based(0.5).should_sample(b"\x00" * 8)


def test_parse_valid_ratio():
    assert parse_trace_id_ratio("0.5") == trace_id_ratio_based(0.5)


def test_parse_invalid_number():
    with pytest.raises(SamplerArgError) as info:
        parse_trace_id_ratio("abc")
    assert str(info.value).startswith("parsing sampler argument: ")
    assert isinstance(info.value.fallback, AlwaysSampler)


def test_parse_negative_ratio():
    with pytest.raises(SamplerArgError) as info:
        parse_trace_id_ratio("-0.5")
    assert str(info.value) == "invalid trace ID ratio: less than 0.0"
    assert info.value.fallback.upper_bound == 0


def test_parse_ratio_above_one():
    with pytest.raises(SamplerArgError) as info:
        parse_trace_id_ratio("1.5")
    assert str(info.value) == "invalid trace ID ratio: greater than 1.0"
    assert isinstance(info.value.fallback, AlwaysSampler)


def test_env_without_sampler():
    assert sampler_from_env({}) is None


def test_env_with_other_sampler():
    assert sampler_from_env({"OTEL_TRACES_SAMPLER": "always_on"}) is None


def test_env_without_argument():
    sampler = sampler_from_env({"OTEL_TRACES_SAMPLER": " TraceIdRatio "})
    assert isinstance(sampler, AlwaysSampler)
    assert sampler.should_sample(MAX_ID) is SamplingDecision.RECORD_AND_SAMPLE
    assert sampler.should_sample(ZERO_ID) is SamplingDecision.RECORD_AND_SAMPLE


def test_env_with_argument():
    sampler = sampler_from_env(
        {"OTEL_TRACES_SAMPLER": "traceidratio", "OTEL_TRACES_SAMPLER_ARG": " 0.5 "}
    )
    assert sampler == trace_id_ratio_based(0.5)


def test_env_with_bad_argument():
    with pytest.raises(SamplerArgError):
        sampler_from_env(
            {"OTEL_TRACES_SAMPLER": "traceidratio", "OTEL_TRACES_SAMPLER_ARG": "2"}
        )