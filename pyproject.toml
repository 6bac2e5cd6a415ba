[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mpsystem"
version = "1.0.0"
description = "Application, window and watchdog managers for a system of applications run in-process or as child processes."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "application manager",
    "multi-process",
    "watchdog",
    "plugins",
    "uri handler",
    "signals",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mpsystem"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
