from __future__ import annotations

import pytest

from lrc_stream.config import load_config, save_config


@pytest.fixture(autouse=True)
def _clean_env(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    for name in (
        "LRC_STREAM_BLOCK_SIZE",
        "LRC_STREAM_WHOLE_TEXT",
        "LRC_STREAM_ENCODING",
        "LRC_STREAM_PACE",
        "LRC_STREAM_CONTEXT_LINES",
        "LRC_STREAM_ALT_SCREEN",
    ):
        monkeypatch.delenv(name, raising=False)


class TestConfig:
    def test_defaults(self, tmp_path):
        cfg = load_config()
        assert cfg.config_dir == tmp_path / "lrc-stream"
        assert cfg.block_size == 50
        assert cfg.whole_text is False
        assert cfg.encoding == "utf-8"
        assert cfg.pace is True
        assert cfg.context_lines == 1
        assert cfg.use_alt_screen is True

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("LRC_STREAM_BLOCK_SIZE", "4096")
        monkeypatch.setenv("LRC_STREAM_WHOLE_TEXT", "1")
        monkeypatch.setenv("LRC_STREAM_PACE", "false")
        monkeypatch.setenv("LRC_STREAM_ALT_SCREEN", "0")
        cfg = load_config()
        assert cfg.block_size == 4096
        assert cfg.whole_text is True
        assert cfg.pace is False
        assert cfg.use_alt_screen is False

    def test_save_and_load(self):
        save_config(block_size=8, whole_text=True)
        cfg = load_config()
        assert cfg.block_size == 8
        assert cfg.whole_text is True

        save_config(pace=False)
        cfg = load_config()
        assert cfg.block_size == 8
        assert cfg.pace is False

    def test_env_wins_over_file(self, monkeypatch):
        save_config(block_size=8)
        monkeypatch.setenv("LRC_STREAM_BLOCK_SIZE", "16")
        assert load_config().block_size == 16

    def test_invalid_values_fall_back(self, tmp_path, monkeypatch):
        (tmp_path / "lrc-stream").mkdir()
        (tmp_path / "lrc-stream" / "config.json").write_text("{broken", encoding="utf-8")
        monkeypatch.setenv("LRC_STREAM_BLOCK_SIZE", "zero")
        monkeypatch.setenv("LRC_STREAM_CONTEXT_LINES", "-3")
        cfg = load_config()
        assert cfg.block_size == 50
        assert cfg.context_lines == 1

    def test_encoding_validated(self, monkeypatch):
        monkeypatch.setenv("LRC_STREAM_ENCODING", "CP1251")
        assert load_config().encoding == "cp1251"

        monkeypatch.setenv("LRC_STREAM_ENCODING", "utf-16")
        assert load_config().encoding == "utf-8"

        monkeypatch.setenv("LRC_STREAM_ENCODING", "klingon")
        assert load_config().encoding == "utf-8"
