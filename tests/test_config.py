import json

import pytest

from mitsumori import config


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    path = tmp_path / "company_config.json"
    monkeypatch.setattr(config, "COMPANY_CONFIG_PATH", path)
    return path


def test_defaults_when_file_missing(config_path, monkeypatch):
    monkeypatch.setenv("OWN_COMPANY_NAME", "株式会社環境変数")

    loaded = config.load_company_config()

    assert loaded["company_name"] == "株式会社環境変数"
    assert "seal_text" in loaded
    assert not config_path.exists()


def test_file_values_override_defaults(config_path):
    config_path.write_text(json.dumps({"company_name": "株式会社ファイル"}), encoding="utf-8")

    loaded = config.load_company_config()

    assert loaded["company_name"] == "株式会社ファイル"
    assert loaded["bank_info"]


def test_broken_file_falls_back(config_path, capsys):
    config_path.write_text("{broken", encoding="utf-8")

    loaded = config.load_company_config()

    assert loaded["company_name"]
    assert "警告" in capsys.readouterr().out


def test_save_round_trip(config_path):
    assert config.save_company_config({"company_name": "株式会社保存", "seal_text": "㈱保/存/之印"})

    assert config.load_company_config()["seal_text"] == "㈱保/存/之印"
