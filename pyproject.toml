[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tasktracker"
version = "0.1.0"
description = "A small JSON HTTP API for creating, listing, updating and deleting tasks"
requires-python = ">=3.10"
keywords = ["tasks", "todo", "rest", "api", "flask", "jwt"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask",
    "pyjwt",
    "bcrypt",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tasktracker = "tasktracker.server:main"

[tool.hatch.build.targets.wheel]
packages = ["tasktracker"]

[tool.pytest.ini_options]
addopts = "-ra"
