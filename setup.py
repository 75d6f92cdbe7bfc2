"""Setup script for the Crowdfunding Ledger."""

import os

from setuptools import setup, find_packages

HERE = os.path.dirname(os.path.abspath(__file__))

setup(
    name="crowdfunding-ledger",
    version="0.1.0",
    description="Transaction ledger, currency catalog and user directory for crowdfunding platforms",
    python_requires=">=3.10",
    packages=find_packages(include=["crowdfunding", "crowdfunding.*"]),
    install_requires=[
        line.strip()
        for line in open(os.path.join(HERE, "requirements.txt"))
        if line.strip() and not line.startswith("#") and not line.startswith("git+")
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
        "dev": [
            "black>=23.0.0",
            "isort>=5.12.0",
            "flake8>=6.0.0",
            "mypy>=1.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "crowdfunding=crowdfunding.cli:app",
        ]
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
