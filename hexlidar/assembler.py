"""
LD系LiDAR スキャン組み立て
"""

import logging
import time
from typing import List, Optional

from .exceptions import LidarError
from .protocol import HexLidarProtocol
from .source import ByteSource
from .types import LidarPoint, LidarScan, PACKETS_PER_SCAN

logger = logging.getLogger(__name__)


class ScanAssembler:
    """38パケットを連結して1回転分のスキャンを作るクラス"""

    def __init__(self, source: ByteSource, protocol: Optional[HexLidarProtocol] = None):
        """
        Args:
            source: パケットを読み込むバイトソース
            protocol: パケット処理（省略時は HexLidarProtocol）
        """
        self.source = source
        self.protocol = protocol or HexLidarProtocol()

    def assemble_scan(self) -> LidarScan:
        """
        1スキャン分のパケットを読み込む

        途中のパケットで失敗した場合は例外をそのまま送出し、
        スキャンは返さない。再同期・再試行は呼び出し側の責務。

        Raises:
            LidarIOError: バイトソースの読み込み失敗
            InvalidLengthError: 長さフィールド不正
        """
        points: List[LidarPoint] = []

        for i in range(PACKETS_PER_SCAN):
            try:
                self.protocol.find_sync(self.source)
                points.extend(self.protocol.decode_packet(self.source))
            except LidarError:
                logger.warning('Error parsing packet %d', i)
                raise

        return LidarScan(points=tuple(points), timestamp=time.time())


def assemble_scan(source: ByteSource) -> LidarScan:
    """ScanAssembler(source).assemble_scan() の省略形"""
    return ScanAssembler(source).assemble_scan()
