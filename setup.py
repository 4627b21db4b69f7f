from setuptools import setup, find_packages

# Read version from __version__.py without importing the package
version_file = {}
with open("layerconf/__version__.py") as fp:
    exec(fp.read(), version_file)
__version__ = version_file['__version__']

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

python_requires = ">=3.9"

install_requires = [
    # Template rendering
    "Jinja2>=3.1",

    # Parsing and typed decoding
    "PyYAML>=6.0",
    "pydantic>=2.0,<3.0",
    "typing-extensions>=4.6",
]

extras_require = {
    # HashiCorp Vault secrets lookup
    "vault": [
        "hvac>=1.0",
    ],
    "test": [
        "pytest>=7.0",
    ],
}

# Classifiers for supported Python versions
classifiers = [
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.9",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Operating System :: OS Independent",
]

setup(
    name="layerconf",
    version=__version__,
    description="Layered, templated JSON/YAML configuration loader",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(include=["layerconf", "layerconf.*"]),
    classifiers=classifiers,
    python_requires=python_requires,
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "layerconf=layerconf.cli:main",
        ],
    },
    zip_safe=False,
)
