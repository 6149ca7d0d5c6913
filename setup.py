from setuptools import setup
from shargs.const import VERSION_STR, DESCRIPTION

setup(
    name="shargs",
    version=VERSION_STR,
    python_requires=">=3.10",
    description=DESCRIPTION,
    packages=["shargs"],
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "shargs = shargs:main",
            "shargs-demo = shargs:main",
        ],
    },
    license="MIT",
    platforms="any",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
