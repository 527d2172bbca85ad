"""Single-stage behaviour: scalar lookup, interval splitting and construction checks."""
from __future__ import annotations

import time

import numpy as np
import pytest

from range_pipeline.index_map import U64_MAX, Interval, total_length
from range_pipeline.range_map import ConfigurationError, RangeEntry, RangeMap


SEED_TO_SOIL = [(50, 98, 2), (52, 50, 48)]


def _value_at(pieces, position):
    """Value at `position` (0-based) inside the concatenation of `pieces`."""
    for piece in pieces:
        if position < piece.length:
            return piece.start + position
        position -= piece.length
    raise AssertionError("position past the end of the output")


@pytest.mark.parametrize(
    "value, expected",
    [(98, 50), (99, 51), (100, 100), (97, 99), (50, 52), (49, 49), (0, 0), (79, 81)],
)
def test_map_value_boundaries(value, expected):
    stage = RangeMap.from_triples(SEED_TO_SOIL)
    assert stage.map_value(value) == expected


def test_empty_stage_is_identity():
    stage = RangeMap([])
    for v in (0, 7, 10**15, U64_MAX):
        assert stage.map_value(v) == v
    iv = Interval(42, 1000)
    assert stage.map_interval(iv) == [iv]


def test_interval_outside_every_entry():
    stage = RangeMap.from_triples(SEED_TO_SOIL)
    assert stage.map_interval(Interval(0, 50)) == [Interval(0, 50)]
    assert stage.map_interval(Interval(100, 7)) == [Interval(100, 7)]


def test_interval_matching_one_entry_exactly():
    stage = RangeMap.from_triples(SEED_TO_SOIL)
    assert stage.map_interval(Interval(98, 2)) == [Interval(50, 2)]


def test_touching_boundary_is_not_an_overlap():
    stage = RangeMap.from_triples([(500, 10, 10)])
    # entry ends where the input starts, and vice versa
    assert stage.map_interval(Interval(20, 5)) == [Interval(20, 5)]
    assert stage.map_interval(Interval(5, 5)) == [Interval(5, 5)]


def test_partial_overlaps_and_gaps():
    stage = RangeMap.from_triples([(100, 10, 5), (0, 20, 5)])
    out = stage.map_interval(Interval(5, 25))
    assert out == [
        Interval(5, 5),
        Interval(100, 5),
        Interval(15, 5),
        Interval(0, 5),
        Interval(25, 5),
    ]
    assert total_length(out) == 25


def test_input_inside_one_entry():
    stage = RangeMap.from_triples([(1000, 0, 100)])
    assert stage.map_interval(Interval(10, 5)) == [Interval(1010, 5)]


def test_negative_offset_entry():
    stage = RangeMap.from_triples([(0, 10**12, 10)])
    assert stage.map_value(10**12 + 3) == 3
    assert stage.map_interval(Interval(10**12 - 2, 4)) == [Interval(10**12 - 2, 2), Interval(0, 2)]


@pytest.mark.parametrize(
    "interval",
    [Interval(0, 200), Interval(49, 3), Interval(97, 4), Interval(60, 1), Interval(99, 100)],
)
def test_partition_and_scalar_consistency(interval):
    stage = RangeMap.from_triples(SEED_TO_SOIL)
    out = stage.map_interval(interval)
    assert total_length(out) == interval.length
    for v in range(interval.start, interval.end):
        assert _value_at(out, v - interval.start) == stage.map_value(v)


def test_large_interval_is_split_by_boundaries_only():
    entries = [(10**13 + i * 10**9, i * 10**10, 10**9) for i in range(20)]
    stage = RangeMap.from_triples(entries)
    iv = Interval(0, 10**12)
    t0 = time.perf_counter()
    out = stage.map_interval(iv)
    elapsed = time.perf_counter() - t0
    assert total_length(out) == 10**12
    assert len(out) <= 2 * len(entries) + 1
    assert elapsed < 1.0


def test_entries_sorted_and_repr():
    stage = RangeMap.from_triples(SEED_TO_SOIL, name="seed-to-soil")
    assert [e.source_start for e in stage.entries] == [50, 98]
    assert len(stage) == 2
    assert "seed-to-soil" in repr(stage)


def test_entry_properties():
    e = RangeEntry(50, 98, 2)
    assert e.offset == -48
    assert e.source_end == 100
    assert e.destination_end == 52
    assert e.as_triple() == (50, 98, 2)


@pytest.mark.parametrize(
    "triple",
    [(1, 2), (-1, 0, 5), (0, 0, 0), (0, U64_MAX, 2), (U64_MAX, 0, 2), (0, 1.5, 2), (True, 0, 1)],
)
def test_entry_contract_violations(triple):
    with pytest.raises(ConfigurationError):
        RangeEntry.from_triple(triple) if len(triple) != 3 else RangeEntry(*triple)


def test_entry_may_reach_domain_edge():
    e = RangeEntry(U64_MAX - 1, 0, 2)
    assert e.destination_end == U64_MAX + 1


def test_overlapping_entries_rejected():
    with pytest.raises(ConfigurationError, match="overlap"):
        RangeMap.from_triples([(0, 10, 5), (100, 14, 5)], name="bad")


def test_map_values_matches_map_value():
    stage = RangeMap.from_triples(SEED_TO_SOIL)
    values = np.array([0, 49, 50, 79, 97, 98, 99, 100, 10**18], dtype=np.uint64)
    out = stage.map_values(values)
    assert out.dtype == np.uint64
    assert [int(x) for x in out] == [stage.map_value(int(v)) for v in values]


def test_map_values_near_domain_edge():
    stage = RangeMap.from_triples([(0, U64_MAX - 9, 10)])
    out = stage.map_values([U64_MAX, U64_MAX - 10, 5])
    assert [int(x) for x in out] == [9, U64_MAX - 10, 5]


def test_map_values_empty_inputs():
    assert RangeMap([]).map_values([1, 2, 3]).tolist() == [1, 2, 3]
    assert RangeMap.from_triples(SEED_TO_SOIL).map_values([]).size == 0


def test_map_values_full_domain_entry():
    stage = RangeMap.from_triples([(0, 0, U64_MAX + 1)])
    assert [int(x) for x in stage.map_values([0, U64_MAX])] == [0, U64_MAX]


def test_overlap_rejected_regardless_of_declaration_order():
    with pytest.raises(ConfigurationError, match="overlap"):
        RangeMap.from_triples([(1000, 0, 100), (5000, 10, 5)])
    with pytest.raises(ConfigurationError, match="overlap"):
        RangeMap.from_triples([(5000, 10, 5), (1000, 0, 100)])


def test_declaration_order_does_not_change_mapping():
    triples = [(1000, 0, 10), (0, 30, 5), (500, 12, 8)]
    forward = RangeMap.from_triples(triples)
    backward = RangeMap.from_triples(list(reversed(triples)))
    iv = Interval(0, 40)
    assert forward.map_interval(iv) == backward.map_interval(iv)
    out = backward.map_interval(iv)
    assert total_length(out) == iv.length
    for v in range(iv.start, iv.end):
        assert backward.map_value(v) == forward.map_value(v) == _value_at(out, v - iv.start)
    assert backward.map_values(list(range(40))).tolist() == [forward.map_value(v) for v in range(40)]


@pytest.mark.parametrize("value", [98.9, 98.0, "98", True, None])
def test_map_value_rejects_non_integers(value):
    stage = RangeMap.from_triples(SEED_TO_SOIL)
    with pytest.raises(ValueError):
        stage.map_value(value)


def test_map_value_accepts_numpy_scalars():
    stage = RangeMap.from_triples([(0, U64_MAX - 9, 10)])
    batch = stage.map_values(np.array([U64_MAX], dtype=np.uint64))
    assert stage.map_value(batch[0]) == 9
    assert stage.map_value(np.uint64(U64_MAX - 10)) == U64_MAX - 10
    assert type(stage.map_value(np.uint64(U64_MAX))) is int
