[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "statusbar"
version = "1.0.0"
description = "Build a status line from system information and publish it to the X root window or standard output"
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = ["status", "statusbar", "monitoring", "window-manager", "x11", "system-information"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
statusbar = "statusbar.status:main"

[tool.hatch.build.targets.wheel]
packages = ["statusbar"]

[tool.pytest.ini_options]
addopts = "-ra"
