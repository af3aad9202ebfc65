from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from rb_bridge.channel import LoopbackChannel
from rb_bridge.session import RowAction, ViewSession
from rb_common.api import BrowserSettings, configure_logging
from rb_host.browser_host import ResourceBrowserHost
from rb_host.documents import DocumentOpener, EditorDocumentOpener
from rb_host.instances_host import VIEW_YAML_ACTION, InstanceResultsHost
from rb_host.providers import DirectoryCatalogProvider, DirectoryInstanceProvider
from rb_ui.tui.system.facade import TUI
from rb_ui.tui.system.protocols import UI

VIEW_YAML_ROW_ACTION = RowAction(name=VIEW_YAML_ACTION, label="View YAML")


@dataclass
class ViewBundle:
    """One view session connected to its host through a loopback channel."""

    channel: LoopbackChannel
    session: ViewSession
    host: Any

    def pump(self) -> int:
        return self.channel.pump()

    def start(self) -> "ViewBundle":
        self.session.start()
        self.pump()
        return self


@dataclass
class UIContext:
    """Container for UI services and state, initialized lazily."""
    headless: bool = False
    debug: bool = False

    # Lazily initialized services
    _ui: Optional[UI] = None
    _settings: Optional[BrowserSettings] = None
    _opener: Optional[DocumentOpener] = None
    bundles: list[ViewBundle] = field(default_factory=list)

    @property
    def ui(self) -> UI:
        if self._ui is None:
            if self.headless:
                from rb_ui.tui.system.headless import HeadlessUI
                self._ui = HeadlessUI()
            else:
                self._ui = TUI()
        return self._ui

    @ui.setter
    def ui(self, value: UI):
        self._ui = value

    @property
    def settings(self) -> BrowserSettings:
        if self._settings is None:
            self._settings = BrowserSettings.from_env()
        return self._settings

    @settings.setter
    def settings(self, value: BrowserSettings):
        self._settings = value

    @property
    def opener(self) -> DocumentOpener:
        if self._opener is None:
            self._opener = EditorDocumentOpener()
        return self._opener

    @opener.setter
    def opener(self, value: DocumentOpener):
        self._opener = value

    def browser(
        self,
        root: Path,
        *,
        target: tuple[str, str] | None = None,
        settings: BrowserSettings | None = None,
    ) -> ViewBundle:
        bundle = build_browser_bundle(
            DirectoryCatalogProvider(root),
            settings=settings or self.settings,
            opener=self.opener,
            target=target,
        )
        self.bundles.append(bundle)
        return bundle

    def instances(self, root: Path, *, settings: BrowserSettings | None = None) -> ViewBundle:
        bundle = build_instances_bundle(
            DirectoryInstanceProvider(root),
            settings=settings or self.settings,
            opener=self.opener,
        )
        self.bundles.append(bundle)
        return bundle


def build_browser_bundle(
    provider: DirectoryCatalogProvider,
    *,
    settings: BrowserSettings | None = None,
    opener: DocumentOpener | None = None,
    target: tuple[str, str] | None = None,
) -> ViewBundle:
    channel = LoopbackChannel()
    session = ViewSession(channel.view.post, settings=settings)
    host = ResourceBrowserHost(channel.host.post, provider, opener=opener, target=target)
    channel.view.on_message(session.receive)
    channel.host.on_message(host.handle)
    return ViewBundle(channel=channel, session=session, host=host)


def build_instances_bundle(
    provider: DirectoryInstanceProvider,
    *,
    settings: BrowserSettings | None = None,
    opener: DocumentOpener | None = None,
) -> ViewBundle:
    channel = LoopbackChannel()
    session = ViewSession(
        channel.view.post, settings=settings, row_actions=(VIEW_YAML_ROW_ACTION,)
    )
    host = InstanceResultsHost(channel.host.post, provider, opener=opener, settings=session.settings)
    channel.view.on_message(session.receive)
    channel.host.on_message(host.handle)
    return ViewBundle(channel=channel, session=session, host=host)


__all__ = [
    "UIContext",
    "ViewBundle",
    "VIEW_YAML_ROW_ACTION",
    "build_browser_bundle",
    "build_instances_bundle",
    "configure_logging",
]
