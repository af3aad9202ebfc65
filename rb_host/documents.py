"""Document-open collaborators: hand raw text to an external editor."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence

from rb_common.errors import DocumentOpenError

logger = logging.getLogger(__name__)

_SUFFIXES = {"yaml": ".yaml", "json": ".json", "markdown": ".md", "text": ".txt"}

Launcher = Callable[[Sequence[str]], object]


class DocumentOpener(Protocol):
    def open(self, text: str, language: str) -> None: ...


def _default_launcher(argv: Sequence[str]) -> object:
    return subprocess.Popen(list(argv))


class EditorDocumentOpener:
    """Write the text to a temporary file and launch ``$VISUAL``/``$EDITOR`` on it."""

    def __init__(self, editor: str | None = None, launcher: Launcher | None = None) -> None:
        self._editor = editor
        self._launcher = launcher or _default_launcher

    @property
    def editor(self) -> str | None:
        return self._editor or os.environ.get("VISUAL") or os.environ.get("EDITOR")

    def open(self, text: str, language: str) -> None:
        editor = self.editor
        if not editor:
            raise DocumentOpenError("No editor configured; set $EDITOR")
        suffix = _SUFFIXES.get(language, ".txt")
        try:
            with tempfile.NamedTemporaryFile(
                "w", suffix=suffix, prefix="rb-", delete=False, encoding="utf-8"
            ) as handle:
                handle.write(text)
            self._launcher([*shlex.split(editor), handle.name])
        except OSError as exc:
            raise DocumentOpenError(
                "Failed to open document", context={"editor": editor}, cause=exc
            ) from exc
        logger.debug("Opened %s document in %s", language, editor)


@dataclass
class OpenedDocument:
    text: str
    language: str


@dataclass
class RecordingDocumentOpener:
    """Keeps opened documents in memory (headless runs and tests)."""

    opened: list[OpenedDocument] = field(default_factory=list)

    def open(self, text: str, language: str) -> None:
        self.opened.append(OpenedDocument(text=text, language=language))


def open_best_effort(opener: DocumentOpener | None, text: str, language: str) -> bool:
    """Open a document, logging and swallowing any collaborator failure."""
    if opener is None:
        logger.debug("No document opener configured")
        return False
    try:
        opener.open(text, language)
    except Exception as exc:  # noqa: BLE001 - opening is best-effort
        logger.warning("Could not open %s document: %s", language, exc)
        return False
    return True
