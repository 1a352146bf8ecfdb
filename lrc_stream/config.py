from __future__ import annotations

import json
from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Any

from lrc_stream.lrc.reassemble import check_encoding

logger = logging.getLogger(__name__)

_FALSY = ("0", "false", "False", "no", "off")


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lrc-stream"
    return Path.home() / ".config" / "lrc-stream"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path

    # Parsing
    block_size: int  # bytes requested per pull
    whole_text: bool  # keep the full lyric text instead of the first word
    encoding: str

    # Playback
    pace: bool  # hold entries back until their timestamp
    context_lines: int  # lines above/below current
    use_alt_screen: bool


def _load_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a JSON object", path)
        return {}
    return data


def _pick(file_cfg: dict[str, Any], key: str, env: str, default: Any) -> Any:
    # Priority: env → config.json → default
    raw = os.getenv(env)
    if raw is not None and raw != "":
        return raw
    return file_cfg.get(key, default)


def _as_int(value: Any, default: int, *, name: str, minimum: int) -> int:
    try:
        out = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s=%r, using %s", name, value, default)
        return default
    if out < minimum:
        logger.warning("%s=%s is below %s, using %s", name, out, minimum, default)
        return default
    return out


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value) not in _FALSY


def _as_encoding(value: Any) -> str:
    try:
        return check_encoding(str(value))
    except ValueError as e:
        logger.warning("%s, using utf-8", e)
        return "utf-8"


def load_config() -> AppConfig:
    config_dir = _config_dir()
    file_cfg = _load_file(config_dir / "config.json")

    return AppConfig(
        config_dir=config_dir,
        block_size=_as_int(
            _pick(file_cfg, "block_size", "LRC_STREAM_BLOCK_SIZE", 50), 50, name="block_size", minimum=1
        ),
        whole_text=_as_bool(_pick(file_cfg, "whole_text", "LRC_STREAM_WHOLE_TEXT", False)),
        encoding=_as_encoding(_pick(file_cfg, "encoding", "LRC_STREAM_ENCODING", "utf-8")),
        pace=_as_bool(_pick(file_cfg, "pace", "LRC_STREAM_PACE", True)),
        context_lines=_as_int(
            _pick(file_cfg, "context_lines", "LRC_STREAM_CONTEXT_LINES", 1), 1, name="context_lines", minimum=0
        ),
        use_alt_screen=_as_bool(_pick(file_cfg, "alt_screen", "LRC_STREAM_ALT_SCREEN", True)),
    )


def save_config(**values: Any) -> Path:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = _load_file(cfg_path)
    data.update(values)
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return cfg_path
