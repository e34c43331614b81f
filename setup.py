import os

from setuptools import find_packages, setup

setup(
    name="tern",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.10.6,<3.0.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
        ],
    },
    author="Tern Contributors",
    description="A tiny composable runtime type checker for configuration-like data",
    long_description=open("README.md").read()
    if os.path.exists("README.md")
    else "",
    long_description_content_type="text/markdown",
)
