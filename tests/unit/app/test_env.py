"""Environment resolution."""

import pytest

from docvault.app.core.env import Env, get_env, pick


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("production", Env.PROD),
        ("prod", Env.PROD),
        ("development", Env.DEV),
        ("testing", Env.TEST),
        ("local", Env.LOCAL),
    ],
)
def test_get_env_synonyms(monkeypatch, raw, expected):
    monkeypatch.setenv("APP_ENV", raw)
    get_env.cache_clear()
    try:
        assert get_env() == expected
    finally:
        get_env.cache_clear()


def test_pick_uses_env_value(monkeypatch):
    monkeypatch.setenv("APP_ENV", "prod")
    get_env.cache_clear()
    try:
        assert pick(prod="json", nonprod="plain") == "json"
    finally:
        get_env.cache_clear()


def test_unknown_env_falls_back_to_local(monkeypatch):
    monkeypatch.setenv("APP_ENV", "moon-base")
    get_env.cache_clear()
    try:
        with pytest.warns(RuntimeWarning, match="moon-base"):
            assert get_env() is Env.LOCAL
    finally:
        get_env.cache_clear()


def test_docvault_env_is_second_choice(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.setenv("DOCVAULT_ENV", "staging")
    get_env.cache_clear()
    try:
        assert get_env() is Env.TEST
        assert pick(prod="json", nonprod="plain") == "plain"
    finally:
        get_env.cache_clear()
