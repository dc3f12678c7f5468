import threading

import serial

from hexlidar import BufferByteSource


class FakeSerial:
    """Stands in for serial.Serial, replaying a fixed byte stream."""

    instances = []
    fail_open = False

    def __init__(self, **kwargs):
        if FakeSerial.fail_open:
            raise serial.SerialException('could not open port')
        self.kwargs = kwargs
        self.data = bytearray()
        self.is_open = True
        self.read_error = None
        self.flushed = False
        FakeSerial.instances.append(self)

    def reset_input_buffer(self):
        self.flushed = True

    def reset_output_buffer(self):
        pass

    def read(self, size=1):
        if self.read_error is not None:
            raise self.read_error
        chunk = bytes(self.data[:size])
        del self.data[:size]
        return chunk

    def close(self):
        self.is_open = False


class GatedSource(BufferByteSource):
    """In-memory source whose reads block until the gate is opened."""

    def __init__(self, data, gate):
        super().__init__(data)
        self.gate = gate
        self.blocked = threading.Event()

    def read(self, size):
        self.blocked.set()
        self.gate.wait()
        return super().read(size)
