"""Setup configuration for pr_metadata"""

from setuptools import setup, find_packages

setup(
    name="pr-metadata-action",
    version="0.1.0",
    description=(
        "GitHub Action that submits merged pull request metadata (comments, "
        "reviews, timeline) to an analytics endpoint."
    ),
    author="PR Metadata Action Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
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
            "pr-metadata-action=pr_metadata.main:main",
        ],
    },
)
