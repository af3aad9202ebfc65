"""Tests for document-open collaborators."""

from __future__ import annotations

from pathlib import Path

import pytest

from rb_common.errors import DocumentOpenError
from rb_host.documents import EditorDocumentOpener, RecordingDocumentOpener, open_best_effort


pytestmark = pytest.mark.unit_host


def test_editor_opener_writes_temp_file_and_launches_editor():
    launched: list[list[str]] = []
    opener = EditorDocumentOpener(editor="code --wait", launcher=lambda argv: launched.append(list(argv)))

    opener.open("kind: Widget\n", "yaml")

    argv = launched[0]
    assert argv[:2] == ["code", "--wait"]
    path = Path(argv[2])
    assert path.suffix == ".yaml"
    assert path.read_text() == "kind: Widget\n"
    path.unlink()


def test_editor_opener_uses_environment(monkeypatch):
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.setenv("EDITOR", "vi")

    assert EditorDocumentOpener().editor == "vi"


def test_editor_opener_without_editor_raises(monkeypatch):
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)

    with pytest.raises(DocumentOpenError):
        EditorDocumentOpener().open("x", "yaml")


def test_launch_failure_is_wrapped():
    def fail(argv):
        raise FileNotFoundError(argv[0])

    opener = EditorDocumentOpener(editor="missing-editor", launcher=fail)

    with pytest.raises(DocumentOpenError) as excinfo:
        opener.open("x", "json")
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_open_best_effort_swallows_failures(monkeypatch):
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)

    assert open_best_effort(EditorDocumentOpener(), "x", "yaml") is False
    assert open_best_effort(None, "x", "yaml") is False


def test_recording_opener_keeps_documents():
    opener = RecordingDocumentOpener()

    assert open_best_effort(opener, "a: 1\n", "yaml") is True
    assert opener.opened[0].text == "a: 1\n"
    assert opener.opened[0].language == "yaml"
