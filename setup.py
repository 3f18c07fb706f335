#!/usr/bin/env python
import re

from setuptools import find_packages, setup

with open("catalog/version.py", "r") as f:
    VERSION = ".".join(re.search(r"VERSION = \((.*)\)", f.read()).group(1).split(", "))

INSTALL_REQUIREMENTS = [
    "Django>=5.1",
    "celery>=5.3",
    "redis",
    "requests",
    "defusedxml",
    "structlog",
    "django-structlog",
    "django-ninja>=1.0",
    "sentry-sdk",
    "psycopg[binary]",
]
TEST_REQUIREMENTS = ["pytest", "pytest-django"]
SCRIPTS = ["manage.py"]
DESCRIPTION = "Board game catalog with on-demand BoardGameGeek import"
CLASSIFIERS = """\
Environment :: Web Environment
Framework :: Django
Programming Language :: Python
Programming Language :: Python :: 3
""".splitlines()

with open("README.md", "r") as f:
    LONG_DESCRIPTION = f.read()


setup(
    name="boardgame-catalog",
    version=VERSION,
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["catalog", "catalog.*", "importer", "importer.*"]),
    include_package_data=True,
    scripts=SCRIPTS,
    install_requires=INSTALL_REQUIREMENTS,
    extras_require={"test": TEST_REQUIREMENTS},
    python_requires=">=3.10",
    classifiers=CLASSIFIERS,
)
