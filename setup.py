from setuptools import setup, find_packages
setup(
    name="sequencefile",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=["zstandard", "pyarrow", "lz4"],
    extras_require={"test": ["pytest"]},
    python_requires=">=3.9",
)
