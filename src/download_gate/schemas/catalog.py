"""Catalog-related Pydantic schemas."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CatalogEntry(BaseModel):
    """A downloadable file as exposed to gate token holders."""

    id: str
    version: str
    file_name: str
    architecture: Literal["32-bit", "64-bit"]
    download_url: str
    sort_order: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class CatalogBatch(BaseModel):
    """Catalog rows sharing one version."""

    version: str
    items: list[CatalogEntry] = Field(default_factory=list)
