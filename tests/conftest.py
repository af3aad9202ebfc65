from collections import defaultdict
from pathlib import Path

import pytest
import yaml
from rich.console import Console
from rich.table import Table

# Declared in pyproject.toml
KNOWN_MARKERS = ("unit_common", "unit_model", "unit_bridge", "unit_host", "unit_ui")

WIDGET_SCHEMA = {
    "description": "Widgets are small parts",
    "type": "object",
    "required": ["spec"],
    "properties": {
        "spec": {
            "type": "object",
            "required": ["size"],
            "properties": {
                "size": {"type": "integer", "description": "Widget size"},
                "color": {"type": "string"},
                "ports": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"port": {"type": "integer"}, "protocol": {"type": "string"}},
                    },
                },
            },
        },
        "status": {"type": "object", "properties": {"ready": {"type": "boolean"}}},
    },
}


def _crd(kind: str, plural: str, group: str, schema: dict | None) -> dict:
    old = {"name": "v1alpha1", "served": True, "storage": False}
    current: dict = {"name": "v1", "served": True, "storage": True}
    if schema is not None:
        current["schema"] = {"openAPIV3Schema": schema}
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": f"{plural}.{group}"},
        "spec": {
            "group": group,
            "names": {"kind": kind, "plural": plural},
            "versions": [old, current],
        },
    }


def _instance(kind: str, name: str, namespace: str, **extra) -> dict:
    doc = {
        "apiVersion": "example.com/v1",
        "kind": kind,
        "metadata": {
            "name": name,
            "namespace": namespace,
            "creationTimestamp": "2024-05-01T10:00:00Z",
            "labels": {"app": name},
        },
    }
    doc.update(extra)
    return doc


@pytest.fixture
def crd_dir(tmp_path: Path) -> Path:
    """Two CRDs in one multi-document file, one without a schema, plus noise."""
    root = tmp_path / "crds"
    (root / "nested").mkdir(parents=True)
    (root / "widgets.yaml").write_text(
        yaml.safe_dump_all(
            [
                _crd("Widget", "widgets", "example.com", WIDGET_SCHEMA),
                _crd("Gadget", "gadgets", "example.com", None),
            ],
            sort_keys=False,
        )
    )
    (root / "nested" / "gizmo.yaml").write_text(
        yaml.safe_dump(
            _crd("Gizmo", "gizmos", "tools.dev", {"type": "object", "properties": {"name": {"type": "string"}}}),
            sort_keys=False,
        )
    )
    (root / "broken.yaml").write_text("kind: [unterminated\n")
    (root / "notes.txt").write_text("not a manifest")
    return root


@pytest.fixture
def shared_kind_dir(tmp_path: Path) -> Path:
    """Two groups defining the same kind, next to CRDs with malformed sections."""
    root = tmp_path / "shared"
    root.mkdir()

    def network(group: str, field: str) -> dict:
        return _crd("Network", "networks", group, {"type": "object", "properties": {field: {"type": "string"}}})

    (root / "networks.yaml").write_text(
        yaml.safe_dump_all([network("a.io", "fromA"), network("b.io", "fromB")], sort_keys=False)
    )
    (root / "malformed.yaml").write_text(
        yaml.safe_dump_all(
            [
                {"kind": "CustomResourceDefinition", "metadata": {"name": "x"}, "spec": "oops"},
                {"kind": "CustomResourceDefinition", "metadata": "oops", "spec": {"names": ["Bad"]}},
                {
                    "kind": "CustomResourceDefinition",
                    "spec": {"group": "c.io", "names": {"kind": "Odd"}, "versions": [{"name": "v1", "schema": "oops"}]},
                },
            ],
            sort_keys=False,
        )
    )
    return root


@pytest.fixture
def instances_dir(tmp_path: Path) -> Path:
    root = tmp_path / "instances"
    root.mkdir()
    (root / "widgets.yaml").write_text(
        yaml.safe_dump_all(
            [
                _instance("Widget", "alpha", "prod", spec={"size": 3}, status={"phase": "Ready", "conditions": []}),
                _instance("Widget", "beta", "dev", spec={"size": 1}),
                _instance("Widget", "gamma", "prod", spec={"size": 2}, status={"phase": "Pending"}),
            ],
            sort_keys=False,
        )
    )
    return root


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """Print pass/fail counts and durations grouped by marker."""
    _ = (exitstatus, config)
    marker_stats = defaultdict(lambda: {"passed": 0, "failed": 0, "skipped": 0, "total": 0, "duration": 0.0})

    for outcome in ("passed", "failed", "skipped"):
        for report in terminalreporter.stats.get(outcome, []):
            # Count the test call, or a skip raised during setup
            if report.when != "call" and not (report.when == "setup" and report.outcome == "skipped"):
                continue
            for marker in KNOWN_MARKERS:
                if marker in report.keywords:
                    stats = marker_stats[marker]
                    stats[outcome] += 1
                    stats["total"] += 1
                    stats["duration"] += getattr(report, "duration", 0.0)

    if not marker_stats:
        return

    table = Table(title="Test Statistics by Marker", show_header=True, header_style="bold magenta")
    table.add_column("Marker", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Passed", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Duration (s)", justify="right", style="blue")

    for marker in sorted(marker_stats):
        stats = marker_stats[marker]
        table.add_row(
            marker,
            str(stats["total"]),
            str(stats["passed"]),
            str(stats["failed"]),
            str(stats["skipped"]),
            f"{stats['duration']:.2f}",
        )

    console = Console()
    console.print("\n")
    console.print(table)
