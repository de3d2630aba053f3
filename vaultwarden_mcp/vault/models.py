"""Vault tool parameter models (validated before any bw call is made)."""

from __future__ import annotations

from pydantic import BaseModel, Field


class GetSecretParams(BaseModel):
    name: str = Field(min_length=1, description="Name or ID of the item to fetch")


class ListSecretsParams(BaseModel):
    search_term: str = Field(description="Term to search for in item names")


class CreateSecretParams(BaseModel):
    item_json: str = Field(min_length=1, description="Item to create, as a JSON object")


class UpdateSecretParams(BaseModel):
    id: str = Field(min_length=1, description="ID of the item to update")
    item_json: str = Field(min_length=1, description="Full updated item, as a JSON object")


class DeleteSecretParams(BaseModel):
    id: str = Field(min_length=1, description="ID of the item to delete")


class TemplateParams(BaseModel):
    # Left as str so an unknown type reaches get_template and raises
    # TemplateNotFoundError rather than a validation error.
    type: str = Field(description="Item type: login, note, card or identity")


class SyncParams(BaseModel):
    pass
