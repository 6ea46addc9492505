"""
Dialog scopes and per-dialog handles for Textual widgets.

A ``DialogProvider`` (an App, Screen or container mixing it in) owns one
``DialogCoordinator``. Widgets below it reach the coordinator through
``find_dialog_coordinator``/``use_dialog``, which walk the DOM ancestry the
same way CSS selectors do. A widget outside any provider gets
``DialogProviderMissingError``.

The provider also renders dialogs: when an identity listed in ``DIALOG_SCREENS``
becomes active, its modal screen is pushed; dismissing that screen closes the
coordinator, and closing the coordinator pops the screen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, ClassVar, Dict, Generic, Optional, TypeVar

from textual.app import App
from textual.dom import DOMNode
from textual.screen import Screen

from invoicedesk.exceptions import DialogProviderMissingError
from invoicedesk.ui.dialog_state import (
    ActiveDialog,
    DialogCoordinator,
    DialogIdentity,
    DialogMode,
)

logger = logging.getLogger(__name__)

P = TypeVar("P")

ScreenFactory = Callable[[ActiveDialog], Screen]


@dataclass(frozen=True)
class DialogHandle(Generic[P]):
    """One widget's view of a single dialog slot.

    ``is_open`` is evaluated when the handle is created. ``open`` reuses the mode
    and payload given to ``use_dialog``. ``close`` closes whichever dialog is
    open in the scope, not only this one.
    """

    current_dialog: ActiveDialog
    is_open: bool
    open: Callable[[], bool]
    close: Callable[[], None]


class DialogProvider:
    """Mixin that makes a DOM node the dialog scope for its descendants."""

    DIALOG_SCREENS: ClassVar[Dict[DialogIdentity, ScreenFactory]] = {}

    def __init__(self, *args, coordinator: Optional[DialogCoordinator] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.dialog_coordinator = coordinator or DialogCoordinator()
        self._dialog_screen: Optional[Screen] = None
        self.dialog_coordinator.subscribe(self._sync_dialog_screen)

    @property
    def _host_app(self) -> App:
        return self if isinstance(self, App) else self.app

    def _sync_dialog_screen(self, state: ActiveDialog) -> None:
        if state.is_idle:
            screen, self._dialog_screen = self._dialog_screen, None
            if screen is not None and self._host_app.screen is screen:
                self._host_app.pop_screen()
            return

        factory = self.DIALOG_SCREENS.get(state.identity)
        if factory is None:
            logger.debug(f"No screen registered for {state.identity.value}")
            return

        screen = factory(state)
        self._dialog_screen = screen
        self._host_app.push_screen(screen, callback=partial(self._dialog_dismissed, state, screen))

    def _dialog_dismissed(self, state: ActiveDialog, screen: Screen, result: Any) -> None:
        if self._dialog_screen is screen:
            self._dialog_screen = None
            self.dialog_coordinator.close_dialog()
        self.on_dialog_result(state, result)

    def on_dialog_result(self, state: ActiveDialog, result: Any) -> None:
        """Called after a rendered dialog dismisses itself. Override to react."""


def find_dialog_coordinator(node: DOMNode) -> DialogCoordinator:
    """Return the coordinator of the nearest enclosing DialogProvider."""
    for ancestor in node.ancestors_with_self:
        if isinstance(ancestor, DialogProvider):
            return ancestor.dialog_coordinator
    raise DialogProviderMissingError(node=repr(node))


def use_dialog(
    node: DOMNode,
    identity: DialogIdentity,
    mode: Optional[DialogMode] = None,
    payload: Optional[P] = None,
) -> DialogHandle[P]:
    """Bind ``identity`` (and a fixed mode/payload) to the scope around ``node``.

    Example:
        handle = use_dialog(self, DialogIdentity.SHARED__INVOICE_SHARE, DialogMode.SHARE, invoice)
        handle.open()
    """
    coordinator = find_dialog_coordinator(node)
    return DialogHandle(
        current_dialog=coordinator.current_dialog,
        is_open=coordinator.is_open(identity),
        open=partial(coordinator.open_dialog, identity, mode or DialogMode.VIEW, payload),
        close=coordinator.close_dialog,
    )
