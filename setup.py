"""Setup script for wavscribe."""

from setuptools import setup, find_packages
import os

# Read version from __init__.py
version = {}
with open(os.path.join("wavscribe", "__init__.py")) as f:
    for line in f:
        if line.startswith("__version__"):
            exec(line, version)
            break

# Read README for long description
with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="wavscribe",
    version=version.get("__version__", "0.1.0"),
    description="Fetch a WAV file, normalize it to 16 kHz mono, and transcribe it "
    "with word-level timestamps",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Multimedia :: Sound/Audio :: Speech",
    ],
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24.0",
        "torch>=2.1.0",
        "torchaudio>=2.1.0",
        "soundfile>=0.12.0",
        "requests>=2.31.0",
        "transformers>=4.40.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "hypothesis>=6.82.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "wavscribe=wavscribe.cli:main",
        ],
    },
)
