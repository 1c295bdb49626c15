from setuptools import setup, find_packages


setup(
    name="silo",
    version="0.2",
    packages=find_packages(include=["silo", "silo.*"]),
    description="Pack directory trees into a single delimiter-framed text archive and back.",
    author="vercingetorx",
    python_requires=">=3.11",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "silo=silo.cli:main",
        ]
    },
)
