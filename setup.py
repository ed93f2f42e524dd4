from setuptools import setup, find_packages

setup(
    name="spanrite",
    version="0.1.0",
    description="Human-readable diagnostics that annotate spans of source text",
    long_description=open("README.md", encoding="UTF-8").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["spanrite", "spanrite.*"]),
    classifiers = [
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires = ["html5tagger>=1.2.1", "pygments>=2.12"],
    extras_require = {"test": ["pytest", "coverage", "beautifulsoup4"]},
    package_data = {"spanrite": ["style.css"]},
    include_package_data = True,
)
