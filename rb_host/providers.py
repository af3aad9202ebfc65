"""Catalog and instance providers backed by a directory of manifests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Protocol

import yaml

from rb_common.errors import CatalogError, SchemaError
from rb_model.catalog import CatalogEntry

logger = logging.getLogger(__name__)

CRD_KIND = "CustomResourceDefinition"
MANIFEST_SUFFIXES = (".yaml", ".yml", ".json")


class CatalogProvider(Protocol):
    def list_entries(self) -> list[CatalogEntry]: ...

    def get_schema(self, name: str) -> dict[str, Any] | None: ...


class InstanceProvider(Protocol):
    def namespaces(self) -> list[str]: ...

    def list_instances(self, namespace: str | None = None) -> list[dict[str, Any]]: ...

    def get_instance(self, name: str, namespace: str | None) -> dict[str, Any] | None: ...


@dataclass(frozen=True)
class ResourceDefinition:
    """The parts of a CustomResourceDefinition the browser needs."""

    kind: str
    plural: str
    group: str
    version: str
    description: str | None = None
    schema: dict[str, Any] | None = field(default=None, compare=False)
    raw: dict[str, Any] | None = field(default=None, compare=False, repr=False)

    @property
    def display_key(self) -> str:
        return f"{self.plural}.{self.group}" if self.group else self.plural

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def to_entry(self) -> CatalogEntry:
        return CatalogEntry(display_key=self.display_key, kind=self.kind, description=self.description)


def _served_version(versions: Any) -> Mapping[str, Any]:
    if not isinstance(versions, list):
        return {}
    candidates = [v for v in versions if isinstance(v, Mapping)]
    for version in candidates:
        if version.get("served", True) and version.get("storage"):
            return version
    for version in candidates:
        if version.get("served", True):
            return version
    return candidates[0] if candidates else {}


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def parse_definition(document: Mapping[str, Any]) -> ResourceDefinition | None:
    """Build a ResourceDefinition from a CRD document, or None if it is not one.

    A CRD whose ``spec`` is not a mapping, or that has no usable kind, is
    skipped. Other malformed sections are treated as missing.
    """
    if document.get("kind") != CRD_KIND:
        return None
    if not isinstance(document.get("spec"), Mapping):
        logger.warning("Skipping CustomResourceDefinition with a malformed spec")
        return None
    spec = document["spec"]
    names = _mapping(spec.get("names"))
    kind = names.get("kind") or _mapping(document.get("metadata")).get("name")
    if not kind or not isinstance(kind, str):
        logger.warning("Skipping CustomResourceDefinition without a usable kind")
        return None
    version = _served_version(spec.get("versions"))
    schema = _mapping(version.get("schema")).get("openAPIV3Schema")
    plural = names.get("plural") or str(kind).lower()
    description = schema.get("description") if isinstance(schema, Mapping) else None
    return ResourceDefinition(
        kind=str(kind),
        plural=str(plural),
        group=str(spec.get("group") or ""),
        version=str(version.get("name") or ""),
        description=description,
        schema=dict(schema) if isinstance(schema, Mapping) else None,
        raw=dict(document),
    )


def iter_manifest_documents(root: Path) -> Iterator[tuple[Path, dict[str, Any]]]:
    """Yield ``(path, document)`` for every mapping document under ``root``.

    Files that fail to parse are logged and skipped.
    """
    if not root.is_dir():
        raise CatalogError("Manifest directory not found", context={"path": root})
    for path in sorted(p for p in root.rglob("*") if p.suffix.lower() in MANIFEST_SUFFIXES):
        try:
            with path.open(encoding="utf-8") as handle:
                documents = list(yaml.safe_load_all(handle))
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Skipping unreadable manifest %s: %s", path, exc)
            continue
        for document in documents:
            if isinstance(document, Mapping):
                yield path, dict(document)


class DirectoryCatalogProvider:
    """Serves CRDs found in a directory tree as catalog entries."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self._definitions: list[ResourceDefinition] | None = None

    def definitions(self) -> list[ResourceDefinition]:
        if self._definitions is None:
            found: list[ResourceDefinition] = []
            for path, document in iter_manifest_documents(self.root):
                definition = parse_definition(document)
                if definition is not None:
                    logger.debug("Loaded %s from %s", definition.display_key, path)
                    found.append(definition)
            found.sort(key=lambda d: (d.kind.lower(), d.display_key))
            self._definitions = found
        return self._definitions

    def refresh(self) -> None:
        self._definitions = None

    def list_entries(self) -> list[CatalogEntry]:
        return [definition.to_entry() for definition in self.definitions()]

    def find(self, display_key: str) -> ResourceDefinition | None:
        return next((d for d in self.definitions() if d.display_key == display_key), None)

    def find_kind(self, group: str, kind: str) -> ResourceDefinition | None:
        return next(
            (d for d in self.definitions() if d.group == group and d.kind == kind), None
        )

    def get_schema(self, name: str) -> dict[str, Any] | None:
        """Schema for a display key, or for a kind when no display key matches.

        A bare kind resolves to the first definition in catalog order, so
        callers that know the display key should pass it.
        """
        definition = self.find(name) or next(
            (d for d in self.definitions() if d.kind == name), None
        )
        if definition is None:
            raise CatalogError("Unknown resource kind", context={"kind": name})
        if definition.schema is None:
            raise SchemaError(
                "Resource definition has no openAPIV3Schema",
                context={"kind": definition.kind, "key": definition.display_key},
            )
        return definition.schema


def _metadata(document: Mapping[str, Any]) -> Mapping[str, Any]:
    return _mapping(document.get("metadata"))


class DirectoryInstanceProvider:
    """Serves non-CRD resource manifests found in a directory tree."""

    def __init__(self, root: Path | str, kinds: Iterable[str] | None = None) -> None:
        self.root = Path(root)
        self._kinds = set(kinds) if kinds else None
        self._instances: list[dict[str, Any]] | None = None

    def _load(self) -> list[dict[str, Any]]:
        if self._instances is None:
            instances: list[dict[str, Any]] = []
            for _, document in iter_manifest_documents(self.root):
                kind = document.get("kind")
                if not isinstance(kind, str) or kind == CRD_KIND or not _metadata(document).get("name"):
                    continue
                if self._kinds is not None and kind not in self._kinds:
                    continue
                instances.append(document)
            self._instances = instances
        return self._instances

    def namespaces(self) -> list[str]:
        found = {_metadata(doc).get("namespace") for doc in self._load()}
        return sorted(str(ns) for ns in found if ns)

    def list_instances(self, namespace: str | None = None) -> list[dict[str, Any]]:
        return [
            doc
            for doc in self._load()
            if namespace is None or _metadata(doc).get("namespace") == namespace
        ]

    def get_instance(self, name: str, namespace: str | None) -> dict[str, Any] | None:
        for doc in self._load():
            meta = _metadata(doc)
            if meta.get("name") == name and (namespace is None or meta.get("namespace") == namespace):
                return doc
        return None
