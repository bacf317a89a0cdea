from __future__ import annotations

import logging

import pytest

import profmerge.dto as dto
from profmerge.compat import check_compatible, equal_value_type
from profmerge.errors import IncompatiblePeriodType, IncompatibleSampleTypes


def _profile(period_type, *sample_types) -> dto.Profile:
    return dto.Profile(period_type=period_type, sample_type=list(sample_types))


def test_equal_value_type() -> None:
    assert equal_value_type(dto.ValueType("cpu", "nanoseconds"), dto.ValueType("cpu", "nanoseconds"))
    assert not equal_value_type(dto.ValueType("cpu", "nanoseconds"), dto.ValueType("cpu", "count"))
    assert not equal_value_type(dto.ValueType("cpu", "count"), dto.ValueType("wall", "count"))
    assert equal_value_type(None, None)
    assert not equal_value_type(dto.ValueType("cpu", "count"), None)


def test_check_compatible_accepts_identical_headers() -> None:
    a = _profile(dto.ValueType("cpu", "nanoseconds"), dto.ValueType("samples", "count"))
    b = _profile(dto.ValueType("cpu", "nanoseconds"), dto.ValueType("samples", "count"))
    check_compatible(a, b)


def test_check_compatible_reports_period_type_mismatch() -> None:
    a = _profile(dto.ValueType("cpu", "nanoseconds"))
    b = _profile(dto.ValueType("cpu", "milliseconds"))

    with pytest.raises(IncompatiblePeriodType) as excinfo:
        check_compatible(a, b)
    assert excinfo.value.context == {"left": "cpu/nanoseconds", "right": "cpu/milliseconds"}
    assert "incompatible period types" in str(excinfo.value)


def test_check_compatible_reports_sample_type_mismatch() -> None:
    period = dto.ValueType("cpu", "nanoseconds")
    a = _profile(period, dto.ValueType("samples", "count"), dto.ValueType("cpu", "nanoseconds"))
    b = _profile(period, dto.ValueType("samples", "count"), dto.ValueType("wall", "nanoseconds"))

    with pytest.raises(IncompatibleSampleTypes) as excinfo:
        check_compatible(a, b)
    assert excinfo.value.as_log_fields()["error_code"] == "incompatible_sample_types"
    assert excinfo.value.context["right"] == ["samples/count", "wall/nanoseconds"]


def test_check_compatible_reports_sample_type_length_mismatch() -> None:
    period = dto.ValueType("cpu", "nanoseconds")
    a = _profile(period, dto.ValueType("samples", "count"))
    b = _profile(period)

    with pytest.raises(IncompatibleSampleTypes):
        check_compatible(a, b)


def test_check_compatible_logs_warning_before_raising(caplog) -> None:
    a = _profile(dto.ValueType("cpu", "nanoseconds"))
    b = _profile(dto.ValueType("cpu", "milliseconds"))

    with caplog.at_level(logging.WARNING, logger="profmerge.compat"):
        with pytest.raises(IncompatiblePeriodType):
            check_compatible(a, b)

    assert [r.levelno for r in caplog.records] == [logging.WARNING]
    assert caplog.records[0].name == "profmerge.compat"
    assert caplog.records[0].getMessage().startswith("Period type mismatch")


def test_check_compatible_logs_sample_type_warning(caplog) -> None:
    period = dto.ValueType("cpu", "nanoseconds")
    a = _profile(period, dto.ValueType("samples", "count"))
    b = _profile(period)

    with caplog.at_level(logging.WARNING, logger="profmerge.compat"):
        with pytest.raises(IncompatibleSampleTypes):
            check_compatible(a, b)

    assert [r.levelno for r in caplog.records] == [logging.WARNING]
    assert caplog.records[0].getMessage().startswith("Sample type mismatch")
