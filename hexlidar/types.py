"""
LD系LiDAR データ型定義
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Tuple
import time


# 1パケットあたりの測定点数
POINTS_PER_PACKET = 12
# 1回転（1スキャン）あたりのパケット数
PACKETS_PER_SCAN = 38
# 1スキャンの測定点数
TOTAL_POINTS = POINTS_PER_PACKET * PACKETS_PER_SCAN


@dataclass(frozen=True)
class LidarPoint:
    """LiDARの単一測定点データ"""
    angle: float      # 角度 (ラジアン、2πを僅かに超える場合あり)
    distance: int     # 距離 (mm, 0-65535)
    intensity: int    # 信号強度 (0-255)

    def is_valid(self):
        """有効なデータポイントか判定"""
        return self.distance > 0


@dataclass(frozen=True)
class LidarScan:
    """
    1回転分のスキャンデータ

    常に TOTAL_POINTS 個の測定点を保持する。点の並びはパケット到着順、
    パケット内はサンプル順で、角度順にはソートされない。
    """
    points: Tuple[LidarPoint, ...]
    timestamp: float = field(default_factory=time.time)  # 完成時刻 (秒)

    def __post_init__(self):
        points = tuple(self.points)
        if len(points) != TOTAL_POINTS:
            raise ValueError(
                f"A scan must hold exactly {TOTAL_POINTS} points, got {len(points)}")
        object.__setattr__(self, 'points', points)

    @property
    def count(self) -> int:
        return len(self.points)

    def get_valid_points(self) -> List[LidarPoint]:
        """有効なポイントのみを返す"""
        return [p for p in self.points if p.is_valid()]

    def __len__(self):
        return len(self.points)

    def __iter__(self) -> Iterator[LidarPoint]:
        return iter(self.points)
