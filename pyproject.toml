[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voxelworld"
version = "0.1.0"
description = "Chunked voxel world model with block lighting, quad mesh data, prefabs and shading helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["voxel", "chunk", "lighting", "flood-fill", "game", "mesh", "prefab"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["voxelworld"]

[tool.pytest.ini_options]
addopts = "-ra"
