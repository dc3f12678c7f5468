import struct

SYNC = bytes([0x54])


def make_body(initial_raw=0, final_raw=9000, samples=None, length=44, speed=3600):
    """46-byte packet body (everything after the sync byte)."""
    if samples is None:
        samples = [(1000, 128)] * 12
    body = struct.pack('<BHH', length, speed, initial_raw)
    for distance, intensity in samples:
        body += struct.pack('<HB', distance, intensity)
    body += struct.pack('<H', final_raw)
    body += bytes([0x00, 0x00, 0x00])
    assert len(body) == 46
    return body


def make_packet(**kwargs):
    return SYNC + make_body(**kwargs)


def make_scan_stream(packets=38, **kwargs):
    """Consecutive packets covering one revolution, 360/38 degrees each."""
    stream = b''
    for i in range(packets):
        initial = round(i * 36000 / 38)
        final = round((i + 1) * 36000 / 38) % 36000
        params = dict(initial_raw=initial, final_raw=final)
        params.update(kwargs)
        stream += make_packet(**params)
    return stream
