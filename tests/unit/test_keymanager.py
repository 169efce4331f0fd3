"""Unit tests for API key lookup."""

import keyring
import keyring.errors
import pytest

from otx_exchange import keymanager

ENTRY = ("otx-exchange", "api-key")


class FakeKeyring:
    """In-memory stand-in for the system keychain."""

    def __init__(self):
        self.store = {}
        self.fail = False

    def get_password(self, service, name):
        if self.fail:
            raise keyring.errors.KeyringError("locked")
        return self.store.get((service, name))

    def set_password(self, service, name, value):
        if self.fail:
            raise keyring.errors.KeyringError("locked")
        self.store[(service, name)] = value

    def delete_password(self, service, name):
        if (service, name) not in self.store:
            raise keyring.errors.PasswordDeleteError("not found")
        del self.store[(service, name)]


@pytest.fixture
def fake_keyring(monkeypatch):
    fake = FakeKeyring()
    monkeypatch.setattr(keymanager.keyring, "get_password", fake.get_password)
    monkeypatch.setattr(keymanager.keyring, "set_password", fake.set_password)
    monkeypatch.setattr(keymanager.keyring, "delete_password", fake.delete_password)
    monkeypatch.delenv("OTX_API_KEY", raising=False)
    return fake


class TestGetApiKey:
    """Tests for key lookup order."""

    def test_environment_first(self, fake_keyring, monkeypatch):
        fake_keyring.store[ENTRY] = "from-keychain"
        monkeypatch.setenv("OTX_API_KEY", "from-env")
        assert keymanager.get_api_key() == "from-env"
        assert keymanager.key_source() == "environment"

    def test_falls_back_to_keychain(self, fake_keyring):
        fake_keyring.store[ENTRY] = "from-keychain"
        assert keymanager.get_api_key() == "from-keychain"
        assert keymanager.key_source() == "keychain"

    def test_not_configured(self, fake_keyring):
        assert keymanager.get_api_key() is None
        assert keymanager.key_source() is None

    def test_keyring_error(self, fake_keyring):
        fake_keyring.fail = True
        assert keymanager.get_api_key() is None
        assert keymanager.key_source() is None


class TestStoreKeys:
    """Tests for keychain writes."""

    def test_store_and_delete(self, fake_keyring):
        keymanager.store_api_key("  abc  ")
        assert fake_keyring.store[ENTRY] == "abc"
        assert keymanager.get_api_key() == "abc"

        assert keymanager.delete_api_key() is True
        assert keymanager.get_api_key() is None

    def test_refuses_blank(self, fake_keyring):
        with pytest.raises(ValueError):
            keymanager.store_api_key("   ")
        assert fake_keyring.store == {}

    def test_keychain_write_failure(self, fake_keyring):
        fake_keyring.fail = True
        with pytest.raises(keyring.errors.KeyringError):
            keymanager.store_api_key("abc")

    def test_delete_missing(self, fake_keyring):
        assert keymanager.delete_api_key() is False
