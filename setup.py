from setuptools import setup, find_packages

setup(
    name="blochsim",
    version="0.1.0",
    description="Density-matrix quantum circuit simulator with per-qubit Bloch vectors",
    author="Sreyas Prabu",
    packages=find_packages(include=["blochsim", "blochsim.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21",
        "scipy>=1.7",
        "qiskit>=1.0",
        "networkx>=2.6",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["blochsim=blochsim.cli:main"],
    },
)
