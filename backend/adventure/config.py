"""基础配置与环境变量加载器，支持 .env 文件与系统环境并存."""
from __future__ import annotations

import os
from pathlib import Path

_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


def _load_env_file(path: Path = _ENV_PATH) -> None:
    """读取 .env 文件到 os.environ，不覆盖已存在的环境变量."""
    if not path.exists():
        return
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()

LOG_LEVEL: str = os.getenv("ADVENTURE_LOG_LEVEL", "WARNING").upper()
if LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
    LOG_LEVEL = "WARNING"
try:
    OUTLINE_INDENT: int = int(os.getenv("ADVENTURE_OUTLINE_INDENT", "4"))
except ValueError:
    OUTLINE_INDENT = 4
if OUTLINE_INDENT < 0:
    OUTLINE_INDENT = 4
CURSOR_MARKER: str = os.getenv("ADVENTURE_CURSOR_MARKER", "*")
