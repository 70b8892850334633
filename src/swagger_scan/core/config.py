import os

_DEFAULT_LOG_LEVEL = "WARNING"
_DEFAULT_EXCLUDE = "vendor,node_modules,.git"


def get_log_level() -> str:
    return os.getenv("SWAGGER_SCAN_LOG_LEVEL", _DEFAULT_LOG_LEVEL).strip().upper() or _DEFAULT_LOG_LEVEL


def get_exclude_dirs() -> list[str]:
    raw = os.getenv("SWAGGER_SCAN_EXCLUDE", _DEFAULT_EXCLUDE)
    return [part.strip() for part in raw.split(",") if part.strip()]
