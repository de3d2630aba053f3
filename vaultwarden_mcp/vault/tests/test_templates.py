"""Tests for item templates."""

import pytest

from vaultwarden_mcp.errors import TemplateNotFoundError
from vaultwarden_mcp.vault.templates import TEMPLATE_TYPES, get_template


class TestTemplates:
    def test_types(self):
        assert TEMPLATE_TYPES == ("login", "note", "card", "identity")

    def test_login_shape(self):
        t = get_template("login")
        assert t["type"] == 1
        assert t["login"]["uris"][0]["uri"].startswith("https://")
        assert "username" in t["login"]
        assert "password" in t["login"]

    def test_note_shape(self):
        t = get_template("note")
        assert t["type"] == 2
        assert t["secureNote"] == {"type": 0}

    def test_card_and_identity_type_codes(self):
        assert get_template("card")["type"] == 3
        assert get_template("identity")["type"] == 4
        assert "number" in get_template("card")["card"]
        assert "email" in get_template("identity")["identity"]

    def test_unknown_type(self):
        with pytest.raises(TemplateNotFoundError, match="unknown"):
            get_template("unknown")

    def test_returns_independent_copies(self):
        first = get_template("login")
        first["login"]["username"] = "changed"
        assert get_template("login")["login"]["username"] != "changed"
