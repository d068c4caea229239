import json

import pytest

from cdr_filter.config import DEFAULT_SETTINGS, PROFILES, diag_enabled, get_profile, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in DEFAULT_SETTINGS:
        monkeypatch.delenv(f"CDR_{key.upper()}", raising=False)
    monkeypatch.delenv("CDR_DIAG", raising=False)


def test_defaults():
    settings = load_settings()
    assert settings == DEFAULT_SETTINGS
    assert settings is not DEFAULT_SETTINGS


def test_precedence_overrides_env_file_defaults(tmp_path, monkeypatch):
    config = tmp_path / "config.json"
    config.write_text(
        json.dumps({"operator": "vi", "crime": "FIR-1", "workers": 2, "format": "xlsx"}),
        encoding="utf-8",
    )
    monkeypatch.setenv("CDR_CRIME", "FIR-2")
    monkeypatch.setenv("CDR_WORKERS", "4")

    settings = load_settings(str(config), {"workers": 8, "operator": None, "inputs": ["a.csv"]})

    assert settings["operator"] == "vi"      # file
    assert settings["crime"] == "FIR-2"      # env over file
    assert settings["workers"] == 8          # override over env
    assert settings["format"] == "xlsx"
    assert "inputs" not in settings


def test_bad_env_integer_is_ignored(monkeypatch):
    monkeypatch.setenv("CDR_WORKERS", "many")
    assert load_settings()["workers"] == 1


def test_invalid_format_rejected():
    with pytest.raises(ValueError, match="Unsupported output format"):
        load_settings(overrides={"format": "parquet"})


def test_config_file_must_be_object(tmp_path):
    config = tmp_path / "config.json"
    config.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError, match="JSON object"):
        load_settings(str(config))


def test_diag_switch(monkeypatch):
    assert not diag_enabled()
    monkeypatch.setenv("CDR_DIAG", "yes")
    assert diag_enabled()


def test_profiles_registered():
    assert sorted(PROFILES) == ["airtel", "bsnl", "jio", "vi"]
    assert get_profile(" JIO ").name == "jio"
    with pytest.raises(KeyError, match="Available"):
        get_profile("mtnl")


def test_profile_overrides_do_not_mutate_shared_profile():
    base = get_profile("vi")
    custom = base.with_overrides(header_aliases={"other party": "B Party"}, call_type_codes={"X": "CALL_IN"})

    assert custom.header_aliases["other party"] == "B Party"
    assert custom.call_type_codes["X"] == "CALL_IN"
    assert "other party" not in base.header_aliases
    assert "X" not in base.call_type_codes
    with pytest.raises(TypeError):
        custom.header_aliases["y"] = "Date"
