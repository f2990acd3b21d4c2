[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "metricsalerts"
version = "0.1.0"
description = "Metrics server with in-memory storage, gzip and HMAC-signed updates, plus agent-side sampling and sending"
requires-python = ">=3.10"
keywords = ["metrics", "monitoring", "gauge", "counter", "agent", "http", "wsgi"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "werkzeug>=2.3",
    "requests>=2.28",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
metricsalerts-server = "metricsalerts.server_cli:main"

[tool.hatch.build.targets.wheel]
packages = ["metricsalerts"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
