from setuptools import setup, find_packages

setup(
    name="scribeproxy",
    version="0.1.0",
    description="WebSocket proxy that transcribes live PCM audio streams in fixed-duration windows",
    author="",
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp>=3.9.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0.0",
        "pypubsub>=4.0.3",
        "rich>=12.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "numpy>=1.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "scribeproxy=scribeproxy.main:main",
        ],
    },
)
