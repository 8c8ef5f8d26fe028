[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "probenotify"
version = "0.1.0"
description = "Notification channels for probe results: Slack, Lark, DingTalk, WeCom, Teams, Telegram, RingCentral, e-mail, SMS, log and shell"
requires-python = ">=3.10"
keywords = ["monitoring", "notification", "webhook", "slack", "sms", "syslog", "probe"]
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
    "Topic :: System :: Monitoring",
]
dependencies = [
    "requests",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["probenotify"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
