[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ecparamcheck"
version = "0.1.0"
description = "Check whether elliptic-curve certificates use named curves or explicit curve parameters"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["x509", "certificate", "elliptic-curve", "ecdsa", "pem", "explicit-parameters"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
    "cryptography",
]

[project.scripts]
ecparamcheck-plain = "ecparamcheck.plain:main"
ecparamcheck-chain = "ecparamcheck.chain:main"
ecparamcheck-trust = "ecparamcheck.trust:main"

[tool.hatch.build.targets.wheel]
packages = ["ecparamcheck"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
