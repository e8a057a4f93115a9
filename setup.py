import tomllib
from setuptools import setup, find_packages

# Parse version from pyproject.toml so release bumps need only modify that file
with open("pyproject.toml", "rb") as fp:
    VERSION = tomllib.load(fp)["project"]["version"]

setup(
    name="dicomlocal",
    version=VERSION,
    description="Ingest local or remotely listed DICOM files and route them to a viewer",
    packages=find_packages(include=["dicomlocal", "dicomlocal.*"]),
    package_data={"dicomlocal.resources": ["*.yaml"]},
    install_requires=[
        "requests>=2.20",
        "pydantic>=2.0",
        "PyYAML>=5.4",
        "click>=8.0",
        "structlog>=22.1",
        "rich>=12.0",
        "pydicom>=3.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "dicomlocal-cli = dicomlocal.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
