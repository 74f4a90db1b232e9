# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Setup configuration for pglet-auth package."""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="pglet-auth",
    version="0.1.0",
    author="pglet-auth Contributors",
    description="Multi-provider OAuth login and identity resolution for pglet servers",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.109.0",  # For the /api routes and responses
        "httpx>=0.27.0",  # For provider token and user-info requests
        "PyJWT>=2.8.0",  # For signed OAuth state and session cookies
        "pydantic>=2.4.0",  # For provider user-info models
        "starlette>=0.49.1",  # For the HTTPS redirect middleware
        "PyYAML>=6.0",  # For config.yaml
        "uvicorn>=0.27.0",  # For serving the app
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pylint>=3.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pglet-auth=pglet_auth.main:main",
        ],
    },
)
