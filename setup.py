"""
Setup file.
"""

import os

from setuptools import find_packages, setup

KEYWORDS = "c c++ build gcc g++ workspace compiler toolchain xml"
HERE = os.path.dirname(os.path.abspath(__file__))


def read_version() -> str:
    with open(os.path.join(HERE, "src", "cbuild", "__init__.py"), encoding="utf-8") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=", 1)[1].strip().strip('"')
    raise RuntimeError("Unable to find __version__")


if __name__ == "__main__":
    setup(
        name="cbuild",
        version=read_version(),
        description="Build C/C++ workspaces described in XML",
        keywords=KEYWORDS,
        python_requires=">=3.8",
        package_dir={"": "src"},
        packages=find_packages(where="src", include=["cbuild", "cbuild.*"]),
        install_requires=[],
        extras_require={"test": ["pytest>=7.0"]},
        entry_points={"console_scripts": ["cbuild=cbuild.cli:main"]},
        include_package_data=True)
