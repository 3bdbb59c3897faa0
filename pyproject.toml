[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "tera"
version = "0.0.1"
description = "A small terminal text editor with syntax highlighting, search and line numbers"
requires-python = ">=3.10"
dependencies = []
keywords = ["editor", "terminal", "text-editor", "syntax-highlighting", "console"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tera = "tera.editor:main"

[tool.setuptools.packages.find]
include = ["tera*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
