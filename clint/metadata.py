# Tool identity shown in report headers and footers.

TOOL_NAME = "clint"
TOOL_VERSION = "0.1.0"
TOOL_URL = "https://github.com/clint-lint/clint"
