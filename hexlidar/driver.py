"""
LD系LiDAR ドライバー
"""

import logging
import threading
from queue import Queue, Empty, Full
from typing import Callable, Optional

from .assembler import ScanAssembler
from .exceptions import LidarError, LidarIOError
from .source import ByteSource, SerialByteSource, DEFAULT_PORT
from .types import LidarScan

logger = logging.getLogger(__name__)


class HexLidarDriver:
    """LD系LiDAR ドライバークラス"""

    # デフォルト設定
    DEFAULT_BAUDRATE = SerialByteSource.DEFAULT_BAUDRATE
    DEFAULT_TIMEOUT = SerialByteSource.DEFAULT_TIMEOUT
    QUEUE_SIZE = 10
    STOP_TIMEOUT = 2.0

    def __init__(self,
                 port: str = DEFAULT_PORT,
                 baudrate: int = DEFAULT_BAUDRATE,
                 timeout: Optional[float] = DEFAULT_TIMEOUT,
                 source: Optional[ByteSource] = None):
        """
        Args:
            port: シリアルポート (例: '/dev/ttyUSB0')
            baudrate: ボーレート (デフォルト: 230400)
            timeout: 読み込みタイムアウト (秒)。None で無期限にブロック
            source: シリアルポートの代わりに使うバイトソース（記録データ再生用）
        """
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.source = source
        self._owns_source = source is None

        # スレッド制御
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._scan_queue: Queue = Queue(maxsize=self.QUEUE_SIZE)

        # スキャンコールバック
        self._scan_callback: Optional[Callable[[LidarScan], None]] = None

        # スキャン統計
        self._scan_count = 0
        self.last_error: Optional[LidarError] = None

    def connect(self):
        """
        シリアルポートに接続

        Raises:
            LidarIOError: ポートを開けなかった場合
        """
        if self.source is not None and self.source.is_open:
            return
        self.source = SerialByteSource(self.port, self.baudrate, self.timeout).open()
        self._owns_source = True

    def disconnect(self):
        """シリアルポートから切断"""
        if self.source is not None and self._owns_source:
            self.source.close()
            self.source = None

    def read_scan(self) -> LidarScan:
        """
        呼び出しスレッドで1スキャンを組み立てて返す

        Raises:
            LidarError: バックグラウンドスキャン中
            LidarIOError: 読み込み失敗、または未接続
            InvalidLengthError: 長さフィールド不正
        """
        if self.is_scanning():
            raise LidarError("Background scanning is active")
        if self.source is None or not self.source.is_open:
            raise LidarIOError("LIDAR is not connected")
        scan = ScanAssembler(self.source).assemble_scan()
        self._scan_count += 1
        return scan

    def start_scanning(self, callback: Optional[Callable[[LidarScan], None]] = None):
        """
        バックグラウンドでスキャン開始

        Args:
            callback: スキャン完了時に呼ばれるコールバック関数

        Raises:
            LidarError: 停止要求済みのスレッドがまだ読み込み中の場合
            LidarIOError: 未接続
        """
        if self.is_scanning():
            if not self._stop_event.is_set():
                logger.warning('Already scanning')
                return
            # 同じソースを2つのスレッドで読まない
            raise LidarError("Previous scan thread is still blocked on read")

        if self.source is None or not self.source.is_open:
            raise LidarIOError("LIDAR is not connected")

        self._scan_callback = callback
        self.last_error = None
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._scan_thread,
                                        args=(self._stop_event,), daemon=True)
        self._thread.start()
        logger.info('Scanning started')

    def stop_scanning(self):
        """スキャン停止"""
        if self._thread is None:
            return

        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=self.STOP_TIMEOUT)

        if self._thread.is_alive():
            logger.warning('Scan thread did not stop within %.1f s', self.STOP_TIMEOUT)
            return
        self._thread = None
        logger.info('Scanning stopped')

    def get_scan(self, timeout: float = 1.0) -> Optional[LidarScan]:
        """
        スキャンデータを取得（キューから）

        Args:
            timeout: タイムアウト時間（秒）

        Returns:
            LidarScanオブジェクト、またはNone
        """
        try:
            return self._scan_queue.get(timeout=timeout)
        except Empty:
            return None

    def _scan_thread(self, stop_event: threading.Event):
        """スキャンスレッド（最初のエラーで停止する）"""
        assembler = ScanAssembler(self.source)

        while not stop_event.is_set():
            try:
                scan = assembler.assemble_scan()
            except LidarError as e:
                logger.error('Failed to get scan data: %s', e)
                self.last_error = e
                break

            self._scan_count += 1
            self._publish(scan)

    def _publish(self, scan: LidarScan):
        """完成したスキャンをコールバックとキューに渡す"""
        if self._scan_callback:
            try:
                self._scan_callback(scan)
            except Exception:
                logger.exception('Scan callback failed')

        # キューが満杯の場合、古いデータを削除
        while True:
            try:
                self._scan_queue.put_nowait(scan)
                return
            except Full:
                try:
                    self._scan_queue.get_nowait()
                except Empty:
                    pass

    def get_scan_count(self) -> int:
        """完了したスキャン数を取得"""
        return self._scan_count

    def is_scanning(self) -> bool:
        """スキャンスレッドが動作中かどうか"""
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self):
        """コンテキストマネージャー: with文のサポート"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """コンテキストマネージャー: クリーンアップ"""
        self.stop_scanning()
        self.disconnect()
