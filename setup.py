from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="buildmatrix",
    version="0.1.0",
    author="Andrey Golovanov",
    description="Expand nested build-matrix documents into flat configuration records.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"buildmatrix.schemas": ["*.json"]},
    python_requires=">=3.11",
    install_requires=[
        "simpleeval>=1.0",
        "jsonschema>=4.18",
    ],
    extras_require={
        "dev": ["pytest", "pyyaml"],
    },
)
