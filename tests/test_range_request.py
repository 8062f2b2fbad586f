import pytest

from core.range_request import ByteRange, RangeSpec, resolve_range

SIZE = 100_000


def test_valid_range():
    result = resolve_range("bytes=0-10000", SIZE)
    assert result == RangeSpec(unit="bytes", ranges=[ByteRange(0, 10000)])


@pytest.mark.parametrize("size", [1, 2, 10, 4096, SIZE])
def test_prefix_range_within_size_is_kept_verbatim(size):
    for k in {0, size // 2, size - 1}:
        result = resolve_range(f"bytes=0-{k}", size)
        assert result is not None
        assert result.ranges[0] == ByteRange(start=0, end=k)


def test_missing_range_header():
    assert resolve_range(None, SIZE) is None
    assert resolve_range("", SIZE) is None


def test_open_ended_range_keeps_end_unset():
    result = resolve_range("bytes=500-", SIZE)
    assert result.ranges == [ByteRange(start=500, end=None)]


def test_end_beyond_size_is_left_for_the_caller():
    result = resolve_range("bytes=90500-100500", SIZE)
    assert result.ranges == [ByteRange(start=90500, end=100500)]


def test_suffix_range():
    result = resolve_range("bytes=-500", SIZE)
    assert result.ranges == [ByteRange(start=SIZE - 500, end=SIZE - 1)]


def test_suffix_longer_than_resource_covers_whole_file():
    result = resolve_range("bytes=-500000", SIZE)
    assert result.ranges == [ByteRange(start=0, end=SIZE - 1)]


def test_multiple_ranges_preserve_client_order():
    result = resolve_range("bytes=1024-2047, 0-1023", SIZE)
    assert result.ranges == [ByteRange(1024, 2047), ByteRange(0, 1023)]


def test_unit_is_case_insensitive():
    assert resolve_range("Bytes=0-1", SIZE) is not None


@pytest.mark.parametrize(
    "header",
    [
        "bytes=150000-160000",
        "bytes=100000-",
        "bytes=100000-100001,150000-",
        "bytes=500-100",
        "bytes=-0",
    ],
)
def test_unsatisfiable_ranges(header, log_records):
    assert resolve_range(header, SIZE) is None
    assert any(
        r["level"].name == "ERROR" and "Unsatisfiable" in r["message"]
        for r in log_records
    )


def test_unsatisfiable_subranges_are_dropped():
    result = resolve_range("bytes=150000-160000,10-20", SIZE)
    assert result.ranges == [ByteRange(10, 20)]


def test_empty_resource_is_never_satisfiable():
    assert resolve_range("bytes=0-", 0) is None
    assert resolve_range("bytes=-10", 0) is None


@pytest.mark.parametrize(
    "header",
    [
        "invalid-range",
        "bytes:0-10000,500-10500",
        "string:bytes:90500-100500",
        "items=0-10",
        "bytes=",
        "bytes=-",
        "bytes=abc-def",
        "bytes=0-10-20",
        "bytes=1.5-2",
        "bytes=0-10;20-30",
    ],
)
def test_malformed_ranges(header, log_records):
    assert resolve_range(header, SIZE) is None
    assert any(
        r["level"].name == "ERROR" and "Malformed" in r["message"]
        for r in log_records
    )
