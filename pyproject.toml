[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "skysphere"
version = "0.1.0"
description = "Celestial sphere model: points, great and small circles, arcs, spherical triangles and SVG rendering"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "celestial sphere",
    "spherical trigonometry",
    "great circle",
    "small circle",
    "quaternion",
    "svg",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Astronomy",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
skysphere = "skysphere.render:main"

[tool.hatch.build.targets.wheel]
packages = ["skysphere"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
