[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "superman"
version = "0.1.0"
description = "A simulated multi-agent company: role-based agents, prioritised mailboxes, dead-letter storage and workflow orchestration."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "agents",
    "multi-agent",
    "mailbox",
    "priority-queue",
    "dead-letter-queue",
    "idempotency",
    "orchestration",
]
classifiers = [
    "Development Status :: 3 - Alpha",
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
packages = ["superman"]

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
