import logging

import pytest

from hexlidar import (BufferByteSource, InvalidLengthError, LidarIOError, LidarScan,
                      ScanAssembler, TOTAL_POINTS, assemble_scan)
from tests.packets import make_body, make_packet, make_scan_stream

GARBAGE = bytes(b for b in range(256) if b != 0x54)


def test_full_scan(scan_stream):
    scan = ScanAssembler(BufferByteSource(scan_stream)).assemble_scan()

    assert isinstance(scan, LidarScan)
    assert scan.count == TOTAL_POINTS == 456
    assert len(scan) == 456


@pytest.mark.parametrize('n', [0, 1, 100])
def test_resync_after_garbage(scan_stream, n):
    garbage = (GARBAGE * 2)[:n]
    scan = assemble_scan(BufferByteSource(garbage + scan_stream))

    assert scan.count == 456
    assert scan.points[0].angle == 0.0
    assert scan.points[0].distance == 1000
    assert scan.points[0].intensity == 128


def test_garbage_between_packets_is_skipped():
    stream = b''.join(b'\x00\xff' + make_packet() for _ in range(38))

    assert assemble_scan(BufferByteSource(stream)).count == 456


def test_points_keep_arrival_order():
    # second packet covers a lower arc than the first
    stream = make_packet(initial_raw=9000, final_raw=18000)
    stream += make_packet(initial_raw=0, final_raw=9000)
    stream += make_scan_stream(36)

    scan = assemble_scan(BufferByteSource(stream))

    assert scan.points[11].angle > scan.points[12].angle
    assert scan.points[12].angle == 0.0


def test_sample_order_within_packets():
    samples = [(100 + i, i) for i in range(12)]
    stream = make_scan_stream(samples=samples)

    scan = assemble_scan(BufferByteSource(stream))

    assert [p.intensity for p in scan.points] == list(range(12)) * 38


def test_io_failure_after_37_packets():
    source = BufferByteSource(make_scan_stream(37))

    with pytest.raises(LidarIOError):
        ScanAssembler(source).assemble_scan()


def test_invalid_packet_aborts_scan():
    stream = make_scan_stream(20) + make_packet(length=12) + make_scan_stream(18)

    with pytest.raises(InvalidLengthError):
        assemble_scan(BufferByteSource(stream))


def test_new_call_starts_from_zero():
    stream = make_scan_stream(5) + make_packet(length=0) + make_scan_stream()
    assembler = ScanAssembler(BufferByteSource(stream))

    with pytest.raises(InvalidLengthError):
        assembler.assemble_scan()

    scan = assembler.assemble_scan()
    assert scan.count == 456


def test_short_reads(scan_stream):
    scan = assemble_scan(BufferByteSource(scan_stream, chunk_size=7))

    assert scan.count == 456


def test_scan_rejects_partial_point_sets():
    points = assemble_scan(BufferByteSource(make_scan_stream())).points

    with pytest.raises(ValueError):
        LidarScan(points=points[:-12])
    with pytest.raises(ValueError):
        LidarScan(points=points + points[:12])


def test_scan_is_immutable(scan_stream):
    scan = assemble_scan(BufferByteSource(scan_stream))

    with pytest.raises(AttributeError):
        scan.points = ()
    with pytest.raises(AttributeError):
        scan.points[0].distance = 0


def test_valid_points_filter():
    samples = [(0, 0), (500, 10)] * 6
    scan = assemble_scan(BufferByteSource(make_scan_stream(samples=samples)))

    valid = scan.get_valid_points()
    assert len(valid) == 228
    assert all(p.distance == 500 for p in valid)


def test_scan_uses_body_offsets():
    body = bytearray(make_body())
    body[5:7] = (0x34, 0x12)
    body[7] = 0x54
    stream = (b'\x54' + bytes(body)) * 38

    scan = assemble_scan(BufferByteSource(stream))

    assert scan.points[0].distance == 0x1234
    assert scan.points[0].intensity == 0x54


def test_scan_iterates_points_in_order(scan_stream):
    scan = assemble_scan(BufferByteSource(scan_stream))

    assert list(scan) == list(scan.points)
    assert sum(1 for _ in scan) == TOTAL_POINTS


def test_bad_packet_logs_single_warning(caplog):
    caplog.set_level(logging.DEBUG, logger='hexlidar')
    stream = make_scan_stream(2) + make_packet(length=7)

    with pytest.raises(InvalidLengthError):
        assemble_scan(BufferByteSource(stream))

    warnings = [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert [r.getMessage() for r in warnings] == ['Error parsing packet 2']
