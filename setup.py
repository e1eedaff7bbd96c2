# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="dirtree",
    version="0.1.0",
    description="Create directory trees from indented text outlines",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["dirtree", "dirtree.*"]),
    python_requires=">=3.8",
    install_requires=[
        "watchdog>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
