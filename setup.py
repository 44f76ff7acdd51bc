from setuptools import find_packages, setup

setup(
    name="trigeval",
    version="1.0.0",
    description="A safe formula engine for parametric curve art.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "pandas",
        "click",
        "rich",
        "pydantic>=2",
        "toml",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "trigeval=trigeval.cli.main:cli",
        ],
    },
)
