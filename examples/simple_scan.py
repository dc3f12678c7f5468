#!/usr/bin/env python3
"""
LD系LiDAR シンプルなスキャンサンプル

使用方法:
    python simple_scan.py /dev/ttyUSB0
"""

import sys
import os
import argparse
import csv
import time

# ライブラリのパスを追加（開発時用）
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hexlidar import HexLidarDriver, LidarError
from hexlidar.source import DEFAULT_PORT


def build_parser():
    """コマンドライン引数の定義"""
    parser = argparse.ArgumentParser(description='LD系LiDAR シンプルスキャン')
    parser.add_argument('port', nargs='?', default=DEFAULT_PORT,
                        help=f'シリアルポート (デフォルト: {DEFAULT_PORT})')
    parser.add_argument('--scans', type=int, default=10, help='取得するスキャン数 (デフォルト: 10)')
    parser.add_argument('--baudrate', type=int, default=HexLidarDriver.DEFAULT_BAUDRATE,
                        help=f'ボーレート (デフォルト: {HexLidarDriver.DEFAULT_BAUDRATE})')
    parser.add_argument('--save', type=str, help='データをCSVファイルに保存')
    return parser


def main():
    args = build_parser().parse_args()

    print(f"LiDAR 接続中: {args.port}")

    csv_data = []
    frame_count = 0
    last_time = time.time()

    try:
        with HexLidarDriver(port=args.port, baudrate=args.baudrate) as driver:
            print("接続成功！")
            print(f"\nスキャン開始... ({args.scans} スキャン取得)")

            for i in range(args.scans):
                # 失敗したスキャンは表示せずに終了する
                scan = driver.read_scan()

                valid_points = scan.get_valid_points()
                print(f"  スキャン {i+1}/{args.scans}: "
                      f"測定点数: {scan.count} (有効: {len(valid_points)})")

                if valid_points:
                    distances = [p.distance for p in valid_points]
                    print(f"    距離範囲: {min(distances)} - {max(distances)} mm")

                    # 最初のスキャンの詳細を表示
                    if i == 0:
                        print(f"\n  最初の10点のデータ:")
                        for j, point in enumerate(valid_points[:10]):
                            print(f"    [{j}] 角度: {point.angle:7.4f} rad, "
                                  f"距離: {point.distance:5d} mm, "
                                  f"強度: {point.intensity}")

                    if args.save:
                        for point in valid_points:
                            csv_data.append([i + 1, point.angle, point.distance,
                                             point.intensity, scan.timestamp])

                # スキャンレート
                frame_count += 1
                now = time.time()
                if now - last_time >= 1.0:
                    print(f"    スキャン/秒: {frame_count / (now - last_time):.1f} | 点数: {scan.count}")
                    frame_count = 0
                    last_time = now

            print(f"\n完了！ 合計スキャン数: {driver.get_scan_count()}")

    except KeyboardInterrupt:
        print("\n中断されました")
    except LidarError as e:
        print(f"スキャン取得エラー: {e}")
        sys.exit(1)
    finally:
        # CSV保存
        if args.save and csv_data:
            print(f"\nデータをCSVファイルに保存中: {args.save}")
            with open(args.save, 'w', newline='') as f:
                writer = csv.writer(f)
                writer.writerow(['Scan', 'Angle(rad)', 'Distance(mm)', 'Intensity', 'Timestamp'])
                writer.writerows(csv_data)
            print(f"保存完了: {len(csv_data)} 行")


if __name__ == '__main__':
    main()
