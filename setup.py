"""Setup script for Pareto Evolve"""

from setuptools import find_packages, setup

with open("requirements.txt") as f:
    requirements = [
        line.strip() for line in f if line.strip() and not line.startswith("#")
    ]

setup(
    name="pareto-evolve",
    version="0.1.0",
    description="Pareto frontier and hypervolume engine for multi-objective prompt optimization",
    packages=find_packages(exclude=["tests*"]),
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "dev": ["pytest", "pytest-asyncio", "pytest-mock", "black", "isort", "mypy"],
    },
)
