from setuptools import setup, find_packages

setup(
    name="wavesim",
    version="0.1.0",
    description="Simulate the superposition of discrete waves and play them as sound",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=[
        "numpy>=1.20.0",
        "sounddevice>=0.4.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.7",
    entry_points={
        "console_scripts": [
            "wavesim=main:main",
        ],
    },
)
