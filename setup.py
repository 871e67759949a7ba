#!/usr/bin/env python
from setuptools import setup, find_packages

setup(
    name="gridbayes",
    version="0.1.0",
    description="Grid approximation of Bayesian posteriors with sampling and credible-interval summaries",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",

    # this will find the gridbayes/ package (and any subpackages),
    # but exclude tests, docs, examples, etc.
    packages=find_packages(exclude=["tests*", "docs*", "examples*"]),

    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.25",
        "scipy>=1.7",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "flake8",
        ],
    },

    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],

    include_package_data=False,
)
