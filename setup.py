# SPDX-FileCopyrightText: 2025 Device Integrity contributors
# SPDX-License-Identifier: MIT

from setuptools import find_packages, setup

setup(
    name="device-integrity",
    version="0.1.0",
    description="Advisory root and emulator detection for Android builds",
    author="Device Integrity contributors",
    license="MIT",
    packages=find_packages(include=["device_integrity", "device_integrity.*", "audit", "audit.*"]),
    python_requires=">=3.9",
    install_requires=[
        "click<9.0,>=8.1",
        "cryptography>=38.0.4",
    ],
    extras_require={
        # on-device only, built by python-for-android
        "android": [
            "pyjnius>=1.5",
        ],
        "test": [
            "pytest>=8.0.0",
            "pytest-cov>=5.0.0",
            "pytest-timeout>=2.3.0",
            "hypothesis>=6.0.0",
        ],
        "dev": [
            "ruff>=0.2.0",
            "black>=23.1.0",
            "isort>=5.10.1",
            "mypy>=1.8.0",
            "bandit>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "device-integrity=device_integrity.cli:main",
        ],
    },
)
