"""
LD系 2D LiDAR デコーダー セットアップ
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="hexlidar",
    version="1.0.0",
    author="Your Name",
    description="Packet decoder and scan assembler for LD-series 2D LIDAR sensors",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: MacOS",
        "Operating System :: POSIX :: Linux",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: System :: Hardware :: Hardware Drivers",
    ],
    python_requires=">=3.7",
    install_requires=[
        "pyserial>=3.5",
    ],
    extras_require={
        "visualization": [
            "numpy>=1.20.0",
            "matplotlib>=3.3.0",
        ],
        "test": [
            "pytest>=7.0",
        ],
    },
)
