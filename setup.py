# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

import os
import re

from setuptools import find_packages, setup


def read_version():
    init_path = os.path.join(os.path.dirname(__file__), "portablenet", "__init__.py")
    with open(init_path, encoding="utf-8") as f:
        match = re.search(r'^__version__ = "([^"]+)"', f.read(), re.MULTILINE)
    return match.group(1)


setup(
    name="portablenet",
    version=read_version(),
    description="Minimal interpreter for serialized tensor programs",
    author="Wahyu Ardiansyah",
    license="Apache-2.0",
    packages=find_packages(include=["portablenet", "portablenet.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21",
        "Pillow>=9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7",
            "hypothesis>=6",
        ],
    },
    entry_points={
        "console_scripts": [
            "portablenet=portablenet.cli:main",
        ],
    },
    zip_safe=False,
)
