[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dhkex"
version = "0.1.0"
description = "Diffie-Hellman and triple Diffie-Hellman key exchange with HMAC-SHA512 key derivation, key files and signed mutual authentication"
requires-python = ">=3.10"
keywords = ["diffie-hellman", "3dh", "key-exchange", "hkdf", "hmac", "cryptography"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
dhkex-demo = "dhkex.dh_example:main"
dhkex-examples = "dhkex.examples:main"

[tool.hatch.build.targets.wheel]
packages = ["dhkex"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
