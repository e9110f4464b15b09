[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cbirkit"
version = "0.1.0"
description = "Content-based image retrieval: rank a folder of images by similarity to a target image."
requires-python = ">=3.10"
keywords = [
    "image retrieval",
    "cbir",
    "histogram",
    "texture",
    "hog",
    "embeddings",
    "computer vision",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
]
dependencies = [
    "numpy",
    "pillow",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cbirkit = "cbirkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["cbirkit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
