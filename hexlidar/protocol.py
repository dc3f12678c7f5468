"""
LD系LiDAR 通信プロトコル実装
"""

import logging
import math
import struct
from typing import List

from .exceptions import InvalidLengthError
from .source import ByteSource, read_exact
from .types import LidarPoint, POINTS_PER_PACKET

logger = logging.getLogger(__name__)


class HexLidarProtocol:
    """同期バイト 0x54 + 46バイト本体 のパケット処理クラス"""

    # パケット定義
    SYNC_BYTE = 0x54
    PACKET_LENGTH = 44      # 本体先頭の長さフィールドの規定値
    PACKET_SIZE = 46        # 同期バイトを除いた本体サイズ

    # 本体内のオフセット
    INITIAL_ANGLE_OFFSET = 3
    SAMPLES_OFFSET = 5
    FINAL_ANGLE_OFFSET = 41
    BYTES_PER_POINT = 3

    def find_sync(self, source: ByteSource):
        """
        同期バイトが現れるまで1バイトずつ読み捨てる

        Raises:
            LidarIOError: バイトソースの読み込み失敗
        """
        skipped = 0
        while source.read_byte() != self.SYNC_BYTE:
            skipped += 1
        if skipped:
            logger.debug('Discarded %d bytes before sync byte', skipped)

    def decode_packet(self, source: ByteSource) -> List[LidarPoint]:
        """
        同期バイト直後から1パケットを読み込んでデコードする

        Returns:
            POINTS_PER_PACKET 個の LidarPoint のリスト

        Raises:
            LidarIOError: 46バイト揃う前に読み込みに失敗した場合
            InvalidLengthError: 長さフィールドが 44 でない場合
        """
        body = read_exact(source, self.PACKET_SIZE)
        return self.parse_packet(body)

    def parse_packet(self, body: bytes) -> List[LidarPoint]:
        """
        パケット本体（同期バイトを除く46バイト）をパースする

        Args:
            body: パケット本体

        Returns:
            LidarPointのリスト（サンプル順）
        """
        if len(body) != self.PACKET_SIZE:
            raise ValueError(f"Packet body must be {self.PACKET_SIZE} bytes, got {len(body)}")

        # 長さフィールドチェック
        if body[0] != self.PACKET_LENGTH:
            logger.debug('Invalid packet length: %d', body[0])
            raise InvalidLengthError(body[0], self.PACKET_LENGTH)

        # 角度（0.01度単位、リトルエンディアン）
        initial_angle = struct.unpack_from('<H', body, self.INITIAL_ANGLE_OFFSET)[0] / 100.0
        final_angle = struct.unpack_from('<H', body, self.FINAL_ANGLE_OFFSET)[0] / 100.0

        # 0度/360度を跨ぐ場合
        if final_angle < initial_angle:
            final_angle += 360.0

        angle_step = (final_angle - initial_angle) / POINTS_PER_PACKET

        points = []
        for i in range(POINTS_PER_PACKET):
            offset = self.SAMPLES_OFFSET + i * self.BYTES_PER_POINT
            distance, intensity = struct.unpack_from('<HB', body, offset)

            # 2π への正規化は行わない
            angle_deg = initial_angle + angle_step * i
            points.append(LidarPoint(
                angle=angle_deg * math.pi / 180.0,
                distance=distance,
                intensity=intensity
            ))

        return points
