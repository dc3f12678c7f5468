"""
LD系 2D LiDAR（同期バイト 0x54）デコーダーライブラリ

使用例:
    from hexlidar import HexLidarDriver

    with HexLidarDriver('/dev/ttyUSB0') as lidar:
        scan = lidar.read_scan()
        for point in scan.get_valid_points():
            print(f"Angle: {point.angle:.4f} rad, Distance: {point.distance} mm")
"""

from .assembler import ScanAssembler, assemble_scan
from .driver import HexLidarDriver
from .exceptions import LidarError, LidarIOError, InvalidLengthError
from .protocol import HexLidarProtocol
from .source import ByteSource, BufferByteSource, SerialByteSource, read_exact
from .types import LidarPoint, LidarScan, POINTS_PER_PACKET, PACKETS_PER_SCAN, TOTAL_POINTS

__version__ = '1.0.0'
__all__ = [
    'HexLidarDriver', 'ScanAssembler', 'assemble_scan', 'HexLidarProtocol',
    'ByteSource', 'BufferByteSource', 'SerialByteSource', 'read_exact',
    'LidarPoint', 'LidarScan', 'POINTS_PER_PACKET', 'PACKETS_PER_SCAN', 'TOTAL_POINTS',
    'LidarError', 'LidarIOError', 'InvalidLengthError',
]
