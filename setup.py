from setuptools import setup, find_packages

setup(
    name="jobtrustscanner",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "jobtrustscanner=jobtrustscanner.cli:main",
        ],
    },
)
