"""
LD系LiDAR バイトソース（シリアルポート／メモリバッファ）
"""

import abc
import logging
import sys
from typing import Optional

import serial

from .exceptions import LidarIOError

logger = logging.getLogger(__name__)


def default_port(platform: str = sys.platform) -> str:
    """プラットフォーム標準のUSBシリアルデバイス名"""
    if platform == 'darwin':
        return '/dev/tty.usbserial-0001'
    return '/dev/ttyUSB0'


DEFAULT_PORT = default_port()


class ByteSource(abc.ABC):
    """
    デコーダーにバイト列を供給する抽象クラス

    read() は 1 バイト以上 size バイト以下を返す（短い読み込みを許可）。
    読み込めない場合は LidarIOError を送出する。
    """

    @abc.abstractmethod
    def read(self, size: int) -> bytes:
        """最大 size バイトを読み込む"""

    @property
    @abc.abstractmethod
    def is_open(self) -> bool:
        """読み込み可能な状態か"""

    def read_byte(self) -> int:
        """1バイト読み込んで整数で返す"""
        return self.read(1)[0]

    def close(self):
        """ソースを閉じる"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def read_exact(source: ByteSource, size: int) -> bytes:
    """
    短い読み込みを繰り返して、ちょうど size バイトを読み込む

    Raises:
        LidarIOError: 途中で読み込みに失敗した場合
    """
    buf = bytearray()
    while len(buf) < size:
        chunk = source.read(size - len(buf))
        if not chunk:
            raise LidarIOError(f"Short read: got {len(buf)} of {size} bytes")
        buf.extend(chunk)
    return bytes(buf)


class SerialByteSource(ByteSource):
    """pyserial によるシリアルポートのバイトソース"""

    # デフォルト設定
    DEFAULT_BAUDRATE = 230400
    DEFAULT_TIMEOUT = None  # ブロッキング読み込み

    def __init__(self,
                 port: str = DEFAULT_PORT,
                 baudrate: int = DEFAULT_BAUDRATE,
                 timeout: Optional[float] = DEFAULT_TIMEOUT):
        """
        Args:
            port: シリアルポート (例: '/dev/ttyUSB0')
            baudrate: ボーレート (デフォルト: 230400)
            timeout: 読み込みタイムアウト (秒)。None で無期限にブロック
        """
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.serial_conn: Optional[serial.Serial] = None

    def open(self):
        """
        シリアルポートを開いて 8N1 に設定する

        Raises:
            LidarIOError: ポートを開けなかった場合
        """
        try:
            self.serial_conn = serial.Serial(
                port=self.port,
                baudrate=self.baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=self.timeout,
                xonxoff=False,
                rtscts=False,
                dsrdtr=False
            )

            # バッファをクリア
            self.serial_conn.reset_input_buffer()
            self.serial_conn.reset_output_buffer()

        except serial.SerialException as err:
            self.serial_conn = None
            raise LidarIOError(f"Error opening {self.port}: {err}") from err

        logger.info('LIDAR initialized on %s at %d baud', self.port, self.baudrate)
        return self

    @property
    def is_open(self) -> bool:
        return self.serial_conn is not None and self.serial_conn.is_open

    def read(self, size: int) -> bytes:
        if not self.is_open:
            raise LidarIOError(f"Serial port {self.port} is not open")
        try:
            data = self.serial_conn.read(size)
        except serial.SerialException as err:
            raise LidarIOError(f"Error reading {self.port}: {err}") from err
        if not data:
            # タイムアウト指定時のみ発生
            raise LidarIOError(f"Read timed out on {self.port}")
        return data

    def close(self):
        if self.serial_conn is not None:
            if self.serial_conn.is_open:
                self.serial_conn.close()
                logger.info('Closed %s', self.port)
            self.serial_conn = None

    def __enter__(self):
        if not self.is_open:
            self.open()
        return self


class BufferByteSource(ByteSource):
    """メモリ上のバイト列を供給するソース（記録データの再生、テスト用）"""

    def __init__(self, data: bytes, chunk_size: Optional[int] = None):
        """
        Args:
            data: 供給するバイト列
            chunk_size: 1回の read で返す最大バイト数（短い読み込みの再現用）
        """
        self._data = bytes(data)
        self._pos = 0
        self._closed = False
        self.chunk_size = chunk_size

    @property
    def is_open(self) -> bool:
        return not self._closed

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read(self, size: int) -> bytes:
        if self._closed:
            raise LidarIOError("Byte source is closed")
        if self._pos >= len(self._data):
            raise LidarIOError("End of byte stream")
        if self.chunk_size is not None:
            size = min(size, self.chunk_size)
        data = self._data[self._pos:self._pos + size]
        self._pos += len(data)
        return data

    def close(self):
        self._closed = True
