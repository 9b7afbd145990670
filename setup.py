from setuptools import setup, find_packages

setup(
    name="despace-tools",
    version="1.0.0",
    description="Recursively replace whitespace in media filenames with underscores",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.9",
    install_requires=[
        "rich",
        "PyYAML",
        "argcomplete",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "despace = apps.cli:cli_despace",
            "despace-config = common.shared.loader:cli_main",
        ],
    },
)
