from setuptools import setup, find_packages

setup(
    name="chromashift",
    version="0.1.0",
    description="A regex rule based output colorizer for command line programs",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"chromashift": ["data/*.toml", "data/rules/*.toml"]},
    install_requires=[
        "rich",
    ],
    extras_require={
        "test": ["pytest", "pytest-asyncio"],
    },
    entry_points={
        "console_scripts": ["chromashift=chromashift.cli:main"],
    },
    python_requires=">=3.11",
)
