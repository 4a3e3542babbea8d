"""Setup configuration for ghanalyzer"""

from setuptools import setup, find_packages

setup(
    name="gh-contributor-analyzer",
    version="0.1.0",
    description=(
        "CLI tool for GitHub repositories: contributor pairs sharing files and "
        "per-contributor activity over the last week."
    ),
    author="GitHub Contributor Analyzer Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "gh-contributor-analyzer=ghanalyzer.main:main",
        ],
    },
)
