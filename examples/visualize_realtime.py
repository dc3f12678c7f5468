#!/usr/bin/env python3
"""
LD系LiDAR リアルタイム可視化サンプル

使用方法:
    python visualize_realtime.py /dev/ttyUSB0

必要なパッケージ:
    pip install numpy matplotlib pyserial
"""

import sys
import os
import argparse
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

# ライブラリのパスを追加（開発時用）
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hexlidar import HexLidarDriver, LidarScan, LidarError
from hexlidar.source import DEFAULT_PORT


def hot_colormap(intensities):
    """
    強度 (0-255) を "hot" カラーマップ（黒→赤→黄→白）のRGBに変換

    Returns:
        (N, 3) の RGB 配列 (0.0-1.0)
    """
    t = np.asarray(intensities, dtype=float) / 255.0
    rgb = np.zeros((t.size, 3))

    low = t < 0.33
    mid = (t >= 0.33) & (t < 0.66)
    high = t >= 0.66

    rgb[low, 0] = t[low] * 3.0
    rgb[mid, 0] = 1.0
    rgb[mid, 1] = (t[mid] - 0.33) * 3.0
    rgb[high, 0] = 1.0
    rgb[high, 1] = 1.0
    rgb[high, 2] = (t[high] - 0.66) * 3.0

    return np.clip(rgb, 0.0, 1.0)


class LidarVisualizer:
    """LiDARデータのリアルタイム可視化クラス"""

    def __init__(self, driver: HexLidarDriver, max_range: float = 1500.0):
        """
        Args:
            driver: HexLidarDriverインスタンス
            max_range: 表示する最大距離 (mm)
        """
        self.driver = driver
        self.max_range = max_range
        self.latest_scan = None

        # グラフ設定
        self.fig, self.ax = plt.subplots(figsize=(8, 8), subplot_kw=dict(projection='polar'))
        self.fig.patch.set_facecolor('black')
        self.scatter = None
        self.stats_text = None

        self._setup_plot()

    def _setup_plot(self):
        """グラフの初期設定"""
        self.ax.set_facecolor('black')
        self.ax.set_ylim(0, self.max_range)
        self.ax.set_title('LIDAR Visualization', color='white', pad=20)

        # 基準円（最大距離の半分と最大距離）
        self.ax.set_rticks([self.max_range / 2, self.max_range])
        self.ax.grid(True, color='0.2')
        self.ax.tick_params(colors='0.5')

        self.scatter = self.ax.scatter([], [], s=4)

        self.stats_text = self.fig.text(0.02, 0.98, '', color='white',
                                        verticalalignment='top', fontsize=10)

        self.fig.canvas.mpl_connect('key_press_event', self._on_key)

    def update_scan(self, scan: LidarScan):
        """スキャンデータを更新（スキャンスレッドから呼ばれる）"""
        self.latest_scan = scan

    def _update_plot(self, frame):
        """プロット更新（アニメーション用）"""
        scan = self.latest_scan
        if scan is None:
            return self.scatter,

        # 完全なスキャンのみ描画する
        if self.driver.last_error is not None:
            self.stats_text.set_text(f"エラー: {self.driver.last_error}")
            return self.scatter,

        angles = np.array([p.angle for p in scan.points])
        distances = np.array([p.distance for p in scan.points], dtype=float)
        intensities = np.array([p.intensity for p in scan.points])

        self.scatter.set_offsets(np.c_[angles, distances])
        self.scatter.set_facecolors(hot_colormap(intensities))

        self.stats_text.set_text(f"スキャン数: {self.driver.get_scan_count()}\n"
                                 f"測定点数: {scan.count}")

        return self.scatter,

    def _on_key(self, event):
        """ESCで終了"""
        if event.key == 'escape':
            plt.close(self.fig)

    def start(self, interval: int = 50):
        """
        可視化開始

        Args:
            interval: アニメーション更新間隔 (ms)
        """
        self.driver.start_scanning(callback=self.update_scan)

        ani = FuncAnimation(self.fig, self._update_plot, interval=interval,
                            blit=False, cache_frame_data=False)

        print("可視化開始。ESCまたはウィンドウを閉じると終了します。")
        plt.show()
        return ani


def list_serial_ports():
    """利用可能なシリアルポートを一覧表示"""
    import serial.tools.list_ports

    ports = serial.tools.list_ports.comports()
    if not ports:
        print("シリアルポートが見つかりません")
        return

    print("利用可能なシリアルポート:")
    for i, port in enumerate(ports, 1):
        print(f"  {i}. {port.device} - {port.description}")


def main():
    parser = argparse.ArgumentParser(
        description='LD系LiDAR リアルタイム可視化',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用例:
  %(prog)s /dev/ttyUSB0
  %(prog)s /dev/ttyUSB0 --max-range 3000
  %(prog)s --list-ports
        """
    )

    parser.add_argument('port', nargs='?', default=DEFAULT_PORT,
                        help=f'シリアルポート (デフォルト: {DEFAULT_PORT})')
    parser.add_argument('--baudrate', type=int, default=HexLidarDriver.DEFAULT_BAUDRATE,
                        help=f'ボーレート (デフォルト: {HexLidarDriver.DEFAULT_BAUDRATE})')
    parser.add_argument('--max-range', type=float, default=1500.0, help='表示最大距離 [mm] (デフォルト: 1500)')
    parser.add_argument('--list-ports', action='store_true', help='利用可能なシリアルポートを一覧表示')

    args = parser.parse_args()

    if args.list_ports:
        list_serial_ports()
        return

    print(f"LiDAR ドライバー初期化中...")
    print(f"  ポート: {args.port}")
    print(f"  ボーレート: {args.baudrate}")

    try:
        with HexLidarDriver(port=args.port, baudrate=args.baudrate) as driver:
            visualizer = LidarVisualizer(driver, max_range=args.max_range)
            visualizer.start()

    except KeyboardInterrupt:
        print("\n中断されました")
    except LidarError as e:
        print(f"エラー: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
