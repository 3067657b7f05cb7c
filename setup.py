import re

import setuptools
from setuptools import find_packages

with open("./yumdocs/__init__.py", "r") as f:
    content = f.read()
    # from https://www.py4u.net/discuss/139845
    version = re.search(r'__version__\s*=\s*[\'"]([^\'"]*)[\'"]', content).group(1)

with open("README.md", "r", encoding="UTF-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="yumdocs",
    version=version,
    author="yumshot",
    description="Static site builder and configuration for the yum documentation site.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yumshot/yum-docs",
    install_requires=[
        "beautifulsoup4",
        "click",
        "jinja2",
        "livereload",
        "orjson",
        "pyromark>=0.10",
        "python-dateutil",
        "python-frontmatter",
        "pyyaml",
        "toposort",
        "tqdm",
    ],
    # ship the scaffold and sitemap templates with the package
    include_package_data=True,
    package_data={"yumdocs": ["templates/*"]},
    packages=find_packages(include=("yumdocs", "yumdocs.*")),
    entry_points={
        "console_scripts": [
            "yumdocs = yumdocs.cli:main",
        ],
    },
    extras_require={
        "dev": [
            "flake8",
            "black==22.3.0",
            "isort",
            "twine",
            "pytest",
            "wheel",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.11",
)
