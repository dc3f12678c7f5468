"""
LD系LiDAR デコーダー 例外定義
"""


class LidarError(Exception):
    """LiDARデコード処理の基底例外"""


class LidarIOError(LidarError):
    """バイトソースの読み込み失敗（デバイスエラー、切断、データ終端）"""


class InvalidLengthError(LidarError):
    """パケット長フィールドが規定値と一致しない"""

    def __init__(self, length: int, expected: int):
        super().__init__(f"Invalid packet length: {length} (expected {expected})")
        self.length = length
        self.expected = expected
