"""Setup file for the Solr bundle package."""

from setuptools import setup, find_packages

setup(
    name="solr-bundle",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click",
        "dependency-injector>=4.41",
        "packaging",
        "pydantic>=2.6",
        "pysolr",
        "python-dotenv",
        "pyyaml",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "solr-bundle=solr_bundle.__main__:main",
        ],
    },
    author="Pimentel",
    author_email="pimentel@example.com",
    description="Configuration and container wiring for Solr clients",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/pimentel/solr-bundle",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.8",
)
