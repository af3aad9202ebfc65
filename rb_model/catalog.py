"""Catalog entries and their text filter."""

from __future__ import annotations

from typing import Iterable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CatalogEntry(BaseModel):
    """A selectable resource type."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    display_key: str = Field(
        validation_alias=AliasChoices("displayKey", "display_key", "name"),
        serialization_alias="displayKey",
    )
    kind: str
    description: str | None = None

    @property
    def label(self) -> str:
        if self.kind == self.display_key:
            return self.kind
        return f"{self.kind} ({self.display_key})"

    def matches(self, query: str) -> bool:
        needle = query.lower()
        if not needle:
            return True
        haystacks = [self.kind, self.display_key, self.description or ""]
        return any(needle in text.lower() for text in haystacks)


def filter_entries(entries: Iterable[CatalogEntry], query: str) -> list[CatalogEntry]:
    """Entries whose kind, key or description contains ``query`` (case-insensitive)."""
    return [entry for entry in entries if entry.matches(query)]


def find_entry(entries: Iterable[CatalogEntry], display_key: str) -> CatalogEntry | None:
    return next((entry for entry in entries if entry.display_key == display_key), None)
