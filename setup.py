#!/usr/bin/env python
"""
Setup script for chronos-rrule.
This is primarily for backward compatibility.
Please use pip install -e . instead.
"""

from setuptools import setup, find_packages

setup(
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={
        "chronos_rrule": ["py.typed"],
    },
)
