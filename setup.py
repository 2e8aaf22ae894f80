"""Setup script for diff_updater package."""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README file for long description
readme_path = Path(__file__).parent / "README.md"
try:
    with open(readme_path, encoding="utf-8") as f:
        long_description = f.read()
except FileNotFoundError:
    long_description = "Delta update resolver and hdiff patch installer"

setup(
    name="diff_updater",
    version="1.0.0",
    description="Resolve and apply binary diff updates of locally installed packages",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["diff_updater", "diff_updater.*"]),
    python_requires=">=3.9",
    install_requires=[
        "loguru>=0.6.0",
        "pydantic>=2.0.0",
        "aiohttp>=3.8.0",
        "aiofiles>=0.8.0",
        "tqdm>=4.64.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "mypy>=1.0.0",
            "black>=22.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Installation/Setup",
        "Topic :: System :: Software Distribution",
        "Typing :: Typed",
    ],
    keywords="updater diff hdiff patch installer",
    entry_points={
        "console_scripts": [
            "diff-updater=diff_updater.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
