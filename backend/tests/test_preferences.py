"""Credential store tests."""

import sqlite3
from unittest.mock import patch

import pytest

from unslop.db.connection import Database
from unslop.preferences import (
    API_KEY_KEY,
    MASK,
    STORE_NAME,
    PreferencesError,
    PreferencesStore,
    mask_api_key,
    validate_api_key,
)

VALID_KEY = "sk-or-v1-0123456789abcdef0123456789abcdef"


@pytest.fixture
def store(tmp_path):
    preferences = PreferencesStore(tmp_path / "preferences.db")
    yield preferences
    preferences.close()


class TestValidation:
    """Tests for validate_api_key()."""

    def test_valid_key(self):
        assert validate_api_key(VALID_KEY) is True

    @pytest.mark.parametrize("key", ["", "   ", "sk-ant-123", "or-v1-123", " sk-or-v1-123"])
    def test_invalid_keys(self, key):
        assert validate_api_key(key) is False


class TestMasking:
    """Tests for mask_api_key()."""

    def test_long_key_shows_prefix_and_suffix(self):
        assert mask_api_key(VALID_KEY) == VALID_KEY[:12] + MASK * 8 + VALID_KEY[-4:]

    def test_short_key_fully_masked(self):
        assert mask_api_key("sk-or-v1-short") == MASK * 12

    def test_boundary_at_twenty_characters(self):
        key = "sk-or-v1-" + "a" * 11

        assert len(key) == 20
        assert mask_api_key(key) == key[:12] + MASK * 8 + key[-4:]
        assert mask_api_key(key[:-1]) == MASK * 12


class TestApiKey:
    """Tests for API key persistence."""

    def test_no_key_initially(self, store):
        assert store.get_api_key() is None
        assert store.has_api_key() is False

    def test_save_and_get(self, store):
        store.save_api_key(VALID_KEY)

        assert store.get_api_key() == VALID_KEY
        assert store.has_api_key() is True

    def test_clear(self, store):
        store.save_api_key(VALID_KEY)
        store.clear_api_key()

        assert store.get_api_key() is None

    def test_survives_reopen(self, tmp_path):
        first = PreferencesStore(tmp_path / "preferences.db")
        first.save_api_key(VALID_KEY)
        first.close()

        second = PreferencesStore(tmp_path / "preferences.db")

        assert second.get_api_key() == VALID_KEY
        second.close()

    def test_save_failure_raises_preferences_error(self, store):
        with patch.object(store._store, "put", side_effect=sqlite3.OperationalError("disk full")):
            with pytest.raises(PreferencesError, match="Failed to save API key"):
                store.save_api_key(VALID_KEY)

    def test_read_failure_returns_none(self, store):
        store.save_api_key(VALID_KEY)

        with patch.object(store._store, "get", side_effect=sqlite3.OperationalError("locked")):
            assert store.get_api_key() is None


class TestModel:
    """Tests for the model preference."""

    def test_save_get_clear(self, store):
        assert store.get_model() is None

        store.save_model("anthropic/claude-3.5-sonnet")
        assert store.get_model() == "anthropic/claude-3.5-sonnet"

        store.clear_model()
        assert store.get_model() is None

    def test_model_and_key_are_independent(self, store):
        store.save_api_key(VALID_KEY)
        store.save_model("openai/gpt-4o")
        store.clear_api_key()

        assert store.get_model() == "openai/gpt-4o"

    def test_clear_failure_raises(self, store):
        with patch.object(store._store, "delete", side_effect=sqlite3.OperationalError("locked")):
            with pytest.raises(PreferencesError, match="Failed to clear model preference"):
                store.clear_model()


def test_unreadable_stored_value_returns_none(tmp_path):
    db_path = tmp_path / "preferences.db"
    PreferencesStore(db_path).close()
    db = Database(db_path)
    db.execute(
        "INSERT INTO entries (store, key, value) VALUES (?, ?, ?)",
        (STORE_NAME, API_KEY_KEY, "sk-or-v1-not-json"),
    )
    db.commit()
    db.close()

    store = PreferencesStore(db_path)

    assert store.get_api_key() is None
    assert store.has_api_key() is False
    store.close()
