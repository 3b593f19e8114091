"""Transient notifications: toasts and self-clearing error messages."""

import asyncio
import logging
from typing import Callable

from .core import UiState

logger = logging.getLogger(__name__)

TOAST_DURATION = 2.0
ERROR_CLEAR_DELAY = 3.0


def call_later(delay: float, callback: Callable[[], None]) -> bool:
    """Schedule ``callback`` on the running loop. Returns False if none is running."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return False
    loop.call_later(delay, callback)
    return True


def show_toast(ui: UiState, message: str) -> None:
    ui.toast.message = message
    ui.toast.visible = True

    def hide():
        # A newer toast owns the slot now.
        if ui.toast.message == message:
            ui.toast.visible = False

    call_later(TOAST_DURATION, hide)


def flash_error(ui: UiState, message: str) -> None:
    """Show an error that clears itself after ERROR_CLEAR_DELAY seconds."""
    ui.error = message

    def clear():
        if ui.error == message:
            ui.error = None

    if not call_later(ERROR_CLEAR_DELAY, clear):
        logger.debug("No running loop; error %r will not self-clear", message)
