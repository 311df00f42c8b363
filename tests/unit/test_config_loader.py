from __future__ import annotations

from pathlib import Path

import pytest

from course_importer.config.loader import ConfigError, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.api.base_url == "http://backend.test/api/admin"
    assert cfg.api.timeout_seconds == 5.0
    assert cfg.api.token is None
    assert cfg.logs_dir == Path("./logs")
    assert cfg.enforce_contact_total is True


def test_load_config_defaults(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "import.yml"
    cfg_path.write_text("api:\n  base_url: http://x.test/api/admin\n", encoding="utf-8")
    cfg = load_config(cfg_path)
    assert cfg.api.timeout_seconds == 5.0
    assert cfg.logs_dir == Path("./logs")
    assert cfg.enforce_contact_total is True


def test_load_config_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError) as e:
        load_config(missing)
    assert "config file not found" in str(e.value)


def test_load_config_missing_base_url(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("  base_url: http://backend.test/api/admin\n", "")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("api: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "invalid yaml" in str(e.value)


def test_load_config_root_not_mapping(write_config: Path):
    write_config.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "mapping" in str(e.value)


def test_env_overrides_base_url_and_sets_token(write_config: Path, monkeypatch):
    monkeypatch.setenv("COLLEGE_API_BASE_URL", "http://override.test/api/admin")
    monkeypatch.setenv("COLLEGE_API_TOKEN", "secret-token")
    cfg = load_config(write_config)
    assert cfg.api.base_url == "http://override.test/api/admin"
    assert cfg.api.token == "secret-token"


def test_contact_total_check_can_be_disabled(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace(
        "enforce_contact_total: true", "enforce_contact_total: false"
    )
    write_config.write_text(text, encoding="utf-8")
    assert load_config(write_config).enforce_contact_total is False
