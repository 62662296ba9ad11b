# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="mscheme",
    version="0.1.0",
    description="Tree-walking Scheme interpreter with a mark-and-sweep heap",
    packages=find_namespace_packages(include=["mscheme", "mscheme.*"]),
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["mscheme = mscheme.repl:main"],
    },
    zip_safe=False,
)
