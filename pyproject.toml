[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kourier"
version = "0.1.0"
description = "Envoy v3 resource builders and gateway configuration for a Knative ingress gateway"
requires-python = ">=3.10"
dependencies = []
keywords = ["envoy", "xds", "ingress", "knative", "gateway", "proxy"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Proxy Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kourier"]

[tool.pytest.ini_options]
addopts = "-ra"
