import json

import pytest

from drivestate.cli import main
from drivestate.config.settings import get_settings
from drivestate.core.env import get_base_dir, load_dotenv_if_present, resolve_data_path


def _clear_caches():
    get_base_dir.cache_clear()
    load_dotenv_if_present.cache_clear()
    get_settings.cache_clear()


@pytest.fixture
def fresh_env():
    _clear_caches()
    yield
    _clear_caches()


def test_base_dir_is_nearest_parent_with_pyproject(tmp_path, monkeypatch, fresh_env):
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n", encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    assert get_base_dir() == tmp_path.resolve()
    assert resolve_data_path("data/pois.json") == tmp_path.resolve() / "data" / "pois.json"


def test_absolute_paths_are_left_alone(tmp_path):
    target = tmp_path / "pois.json"
    assert resolve_data_path(target) == target


def test_dotenv_values_reach_settings_without_overriding_the_environment(tmp_path, monkeypatch, fresh_env):
    (tmp_path / ".env").write_text(
        "DRIVESTATE_TIMEZONE=Asia/Tokyo\nDRIVESTATE_LOG_LEVEL=DEBUG\n", encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    # setenv first so teardown also removes what the .env file adds.
    monkeypatch.setenv("DRIVESTATE_TIMEZONE", "unset")
    monkeypatch.delenv("DRIVESTATE_TIMEZONE")
    monkeypatch.setenv("DRIVESTATE_LOG_LEVEL", "WARNING")

    assert load_dotenv_if_present() == tmp_path.resolve() / ".env"
    settings = get_settings()
    assert settings.app.timezone == "Asia/Tokyo"
    assert settings.app.log_level == "WARNING"


def test_catalog_path_from_environment_is_the_cli_default(tmp_path, monkeypatch, capsys, fresh_env):
    catalog = tmp_path / "pois.json"
    catalog.write_text(
        json.dumps([{"id": "east", "name": "Pilot", "lat": 39.0, "lng": -93.9, "category": "fuel"}]),
        encoding="utf-8",
    )
    monkeypatch.setenv("DRIVESTATE_CATALOG_PATH", str(catalog))

    assert main(["ahead", "--lat", "39.0", "--lng", "-94.0", "--heading", "90", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [p["id"] for p in data["poisAhead"]] == ["east"]
