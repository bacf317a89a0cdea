"""
Shared pytest fixtures for profmerge tests.

`make_profile` builds small profiles from readable stacks: each sample is a
list of (function name, line) frames, leaf first, plus its values. Every frame
gets a location inside a single mapping, at an offset from the mapping start
that depends only on the order frames are first seen in the test, so the
same frame sits at the same offset in every profile a test builds.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

import profmerge.dto as dto


@pytest.fixture
def make_profile() -> Callable[..., dto.Profile]:
    offsets: dict[tuple[str, int], int] = {}

    def _make(
        samples: list[tuple[list[tuple[str, int]], list[int]]],
        *,
        mapping_start: int = 0x400000,
        mapping_size: int = 0x10000,
        build_id: str = "abc123",
        file: str = "/usr/bin/app",
        sample_type: list[dto.ValueType] | None = None,
        period_type: dto.ValueType | None = None,
        **header: Any,
    ) -> dto.Profile:
        mapping = dto.Mapping(
            id=1,
            start=mapping_start,
            limit=mapping_start + mapping_size,
            file=file,
            build_id=build_id,
            has_functions=True,
        )
        functions: dict[str, dto.Function] = {}
        locations: dict[tuple[str, int], dto.Location] = {}
        profile_samples = []
        for frames, values in samples:
            location_ids = []
            for name, line in frames:
                if name not in functions:
                    functions[name] = dto.Function(
                        id=len(functions) + 1, name=name, system_name=name, filename="app.c"
                    )
                if (name, line) not in locations:
                    locations[(name, line)] = dto.Location(
                        id=len(locations) + 1,
                        mapping_id=mapping.id,
                        address=mapping_start + offsets.setdefault((name, line), 0x1000 + 0x10 * len(offsets)),
                        lines=[dto.Line(function_id=functions[name].id, line=line)],
                    )
                location_ids.append(locations[(name, line)].id)
            profile_samples.append(dto.Sample(location_ids=location_ids, values=list(values)))
        return dto.Profile(
            sample_type=sample_type if sample_type is not None else [dto.ValueType("cpu", "nanoseconds")],
            period_type=period_type if period_type is not None else dto.ValueType("cpu", "nanoseconds"),
            period=header.pop("period", 10),
            samples=profile_samples,
            mappings=[mapping],
            locations=list(locations.values()),
            functions=list(functions.values()),
            **header,
        )

    return _make
