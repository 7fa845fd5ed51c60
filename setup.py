from setuptools import setup, find_packages

setup(
    name="visfeat",
    version="1.0.0",
    description="Visual feature model, descriptor distances and spatially indexed feature lists",
    author="NovaVista",
    packages=find_packages(include=["visfeat", "visfeat.*"]),
    install_requires=[
        "opencv-python>=4.8.0",
        "numpy>=1.24.0",
        "scipy>=1.10.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
)
