[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "esasg"
version = "2.0.0"
description = "Building blocks for running Elasticsearch on autoscaling groups: snapshot retention, CloudWatch event decoding and extra cluster APIs"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["elasticsearch", "autoscaling", "cloudwatch", "snapshots", "retention"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Clustering",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["esasg"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
