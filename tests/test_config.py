"""Tests for preflight.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from preflight.config import check_environment, load_mirror_config, parse_env
from preflight.constants import DEFAULT_MIRRORS
from preflight.exceptions import ConfigurationError


@pytest.mark.usefixtures("clean_env")
class TestParseEnv:
    def test_defaults(self):
        cfg = parse_env()
        assert cfg.timezone == ""
        assert cfg.country == ""
        assert cfg.ram_size == "2G"
        assert cfg.ram_check is True
        assert cfg.cpu_cores == "2"
        assert cfg.storage == Path("/storage")
        assert cfg.commit is False
        assert cfg.mirrors_config is None

    def test_overrides(self, mock_env):
        mock_env(TZ="Asia/Shanghai", COUNTRY="de", RAM_SIZE="8G", CPU_CORES=" 4 ", STORAGE="/data")
        cfg = parse_env()
        assert cfg.timezone == "Asia/Shanghai"
        assert cfg.country == "DE"
        assert cfg.ram_size == "8G"
        assert cfg.cpu_cores == "4"
        assert cfg.storage == Path("/data")

    @pytest.mark.parametrize("value", ["N", "n", "no", "No", "0", "false", "off"])
    def test_ram_check_opt_out(self, mock_env, value):
        mock_env(RAM_CHECK=value)
        assert parse_env().ram_check is False

    @pytest.mark.parametrize("value", ["Y", "yes", "1", "true"])
    def test_ram_check_enabled(self, mock_env, value):
        mock_env(RAM_CHECK=value)
        assert parse_env().ram_check is True

    @pytest.mark.parametrize("value", ["four", "2c", "-1", "1.5"])
    def test_invalid_cpu_cores(self, mock_env, value):
        mock_env(CPU_CORES=value)
        with pytest.raises(ConfigurationError, match="Invalid amount of CPU_CORES") as exc:
            parse_env()
        assert exc.value.exit_code == 15

    def test_commit_forces_local_storage(self, mock_env):
        mock_env(COMMIT="Y", STORAGE="/data")
        cfg = parse_env()
        assert cfg.commit is True
        assert cfg.storage == Path("/local")

    @pytest.mark.parametrize("value", ["y", "yes", "1"])
    def test_commit_prefixes(self, mock_env, value):
        mock_env(COMMIT=value)
        assert parse_env().commit is True

    @pytest.mark.parametrize("value", ["true", "on", "N", "0", ""])
    def test_commit_other_values_keep_storage(self, mock_env, value):
        mock_env(COMMIT=value, STORAGE="/data")
        cfg = parse_env()
        assert cfg.commit is False
        assert cfg.storage == Path("/data")

    def test_mirrors_config_path(self, mock_env, tmp_path):
        mock_env(MIRRORS_CONFIG=str(tmp_path / "mirrors.yaml"))
        assert parse_env().mirrors_config == tmp_path / "mirrors.yaml"


class TestCheckEnvironment:
    @pytest.fixture
    def shm(self, tmp_path, monkeypatch):
        shm_dir = tmp_path / "dev-shm"
        shm_dir.mkdir()
        monkeypatch.setattr("preflight.config.SHM_DIR", shm_dir)
        monkeypatch.setattr("preflight.config.RUN_SHM_DIR", tmp_path / "run-shm")
        return shm_dir

    def test_ok(self, shm, preflight_config, tmp_path):
        check_environment(preflight_config)
        assert (tmp_path / "run-shm").resolve() == shm

    def test_missing_shm(self, tmp_path, monkeypatch, preflight_config):
        monkeypatch.setattr("preflight.config.SHM_DIR", tmp_path / "missing")
        with pytest.raises(ConfigurationError, match="not found") as exc:
            check_environment(preflight_config)
        assert exc.value.exit_code == 14

    def test_missing_storage(self, shm, preflight_config, tmp_path):
        preflight_config.storage = tmp_path / "nope"
        with pytest.raises(ConfigurationError, match=r"Storage folder \(.*nope\) not found") as exc:
            check_environment(preflight_config)
        assert exc.value.exit_code == 13

    def test_commit_creates_storage(self, shm, preflight_config, tmp_path):
        preflight_config.commit = True
        preflight_config.storage = tmp_path / "local"
        check_environment(preflight_config)
        assert (tmp_path / "local").is_dir()


class TestLoadMirrorConfig:
    def test_defaults_when_default_file_missing(self, monkeypatch, tmp_path):
        monkeypatch.setattr("preflight.config.DEFAULT_MIRRORS_CONFIG", tmp_path / "none.yaml")
        assert load_mirror_config() == DEFAULT_MIRRORS

    def test_explicit_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Mirror config missing"):
            load_mirror_config(tmp_path / "none.yaml")

    def test_merges_and_removes(self, tmp_path):
        path = tmp_path / "mirrors.yaml"
        path.write_text("mirrors:\n  de: ftp.de.debian.org\n  CN: ''\n")
        mirrors = load_mirror_config(path)
        assert mirrors == {"DE": "ftp.de.debian.org"}

    def test_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "mirrors.yaml"
        path.write_text("mirrors:\n  - a\n  - b\n")
        with pytest.raises(ConfigurationError, match="'mirrors' mapping"):
            load_mirror_config(path)
