import os

import pytest

from episode_service import config


def test_positive_int_reads_env(monkeypatch):
    monkeypatch.setenv("MAX_SIZE_ID_LIST", "25")
    assert config._get_positive_int("MAX_SIZE_ID_LIST", 100) == 25

    monkeypatch.delenv("MAX_SIZE_ID_LIST")
    assert config._get_positive_int("MAX_SIZE_ID_LIST", 100) == 100


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_positive_int_rejects_invalid_values(monkeypatch, raw):
    monkeypatch.setenv("MAX_FUTURE_RELEASE_YEARS", raw)
    with pytest.raises(ValueError):
        config._get_positive_int("MAX_FUTURE_RELEASE_YEARS", 10)


def test_positive_float_rejects_invalid_values(monkeypatch):
    monkeypatch.setenv("ANIME_API_TIMEOUT_SECONDS", "soon")
    with pytest.raises(ValueError):
        config._get_positive_float("ANIME_API_TIMEOUT_SECONDS", 2.0)

    monkeypatch.setenv("ANIME_API_TIMEOUT_SECONDS", "0.5")
    assert config._get_positive_float("ANIME_API_TIMEOUT_SECONDS", 2.0) == 0.5


def test_required_values(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "  ")
    with pytest.raises(RuntimeError):
        config.require_mongo_uri()

    monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017/episodes")
    assert config.require_mongo_uri() == "mongodb://localhost:27017/episodes"

    monkeypatch.setenv("ANIME_API_URL", "http://anime.local/api/anime/")
    assert config.require_anime_api_url() == "http://anime.local/api/anime"


def test_env_file_does_not_override_existing(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\nEPISODE_TEST_KEY='from-file'\nEPISODE_TEST_NEW=\"new\"\nbroken-line\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("EPISODE_TEST_KEY", "from-env")
    monkeypatch.delenv("EPISODE_TEST_NEW", raising=False)

    config._load_env_file(env_file)

    assert os.environ["EPISODE_TEST_KEY"] == "from-env"
    assert os.environ["EPISODE_TEST_NEW"] == "new"
    monkeypatch.delenv("EPISODE_TEST_NEW")
