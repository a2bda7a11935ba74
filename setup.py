from setuptools import setup, find_packages

setup(
    name="corrga",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        # System
        'python-dotenv',

        # Data Handling
        'numpy',
        'pandas',

        # Computer Vision
        'opencv-python',
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
            'pytest-mock>=3.10.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'corrga = corrga.cli.corrga:main',
        ],
    },
    include_package_data=True,
    description="Genetic algorithm template correlation search with an interactive OpenCV tracker",
)
