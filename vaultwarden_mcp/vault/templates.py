"""Item templates for create_secret — the JSON shape bw expects per item type."""

from __future__ import annotations

import copy
from typing import Any

from vaultwarden_mcp.errors import TemplateNotFoundError

# bw item type codes
ITEM_TYPE_LOGIN = 1
ITEM_TYPE_NOTE = 2
ITEM_TYPE_CARD = 3
ITEM_TYPE_IDENTITY = 4

_TEMPLATES: dict[str, dict[str, Any]] = {
    "login": {
        "name": "Item name",
        "type": ITEM_TYPE_LOGIN,
        "login": {
            "uris": [{"match": None, "uri": "https://example.com"}],
            "username": "username",
            "password": "password",
        },
    },
    "note": {
        "name": "Note name",
        "type": ITEM_TYPE_NOTE,
        "secureNote": {"type": 0},
        "notes": "Note content.",
    },
    "card": {
        "name": "Card name",
        "type": ITEM_TYPE_CARD,
        "card": {
            "cardholderName": "",
            "brand": "",
            "number": "",
            "expMonth": "",
            "expYear": "",
            "code": "",
        },
    },
    "identity": {
        "name": "Identity name",
        "type": ITEM_TYPE_IDENTITY,
        "identity": {
            "title": "",
            "firstName": "",
            "middleName": "",
            "lastName": "",
            "address1": "",
            "city": "",
            "state": "",
            "postalCode": "",
            "country": "",
            "company": "",
            "email": "",
            "phone": "",
        },
    },
}

TEMPLATE_TYPES: tuple[str, ...] = tuple(_TEMPLATES)


def get_template(item_type: str) -> dict[str, Any]:
    """Return a fresh copy of the template for item_type.

    Raises:
        TemplateNotFoundError: If item_type is not one of TEMPLATE_TYPES.
    """
    try:
        template = _TEMPLATES[item_type]
    except KeyError:
        raise TemplateNotFoundError(
            f"Unknown template type: {item_type!r}. Valid: {', '.join(TEMPLATE_TYPES)}"
        ) from None
    return copy.deepcopy(template)
