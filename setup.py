#!/usr/bin/env python
# -*- coding: utf-8 -*-
# Copyright 2026 Canonical Ltd.  This software is licensed under the
# GNU Lesser General Public License version 3 (see the file LICENSE).

from setuptools import find_packages, setup


VERSION = "0.1"


setup(
    name="versionary",
    version=VERSION,
    description="Versioned API routing, deprecation and documentation tool",
    author="Canonical Online Services",
    author_email="online-services@lists.canonical.com",
    url="https://github.com/canonical/versionary",
    license="LGPLv3",
    packages=find_packages(exclude=["examples", "*tests"]),
    long_description="".join(open("README.rst").readlines()[2:]),
    long_description_content_type="text/x-rst",
    install_requires=["jsonschema", "pyyaml", "Jinja2"],
    extras_require=dict(
        flask=["Flask"],
        test=["Flask", "testtools", "fixtures"],
    ),
    test_suite="versionary.tests",
    package_data={"versionary": ["templates/*.j2"]},
    entry_points={
        "console_scripts": [
            "versionary = versionary.__main__:main",
        ]
    },
)
