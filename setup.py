import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="urivalue",
    version="1.0.0",
    description="Immutable, validated URI value type with a SQLAlchemy column type",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=setuptools.find_packages("src"),
    python_requires=">=3.8",
    install_requires=[
        "appdirs",  # Site and user configuration locations
        "click",  # Command line interface
        "requests",  # Existence probe
        "sqlalchemy>=1.4",  # Column type
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "urivalue=urivalue.cli.urivalue:main",
        ],
    },
)
