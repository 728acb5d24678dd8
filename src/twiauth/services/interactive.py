"""Interactive user-authorization step.

The authorization sequence never talks to a browser directly; it awaits an
:class:`InteractiveSession`, which shows the authorization URL to the user and
resolves with the callback URL the provider redirected to.
"""

import asyncio
import webbrowser
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from rich.console import Console
from structlog import get_logger

from twiauth.exceptions import InteractiveSessionError, UserCancelledError


logger = get_logger(__name__)


@runtime_checkable
class InteractiveSession(Protocol):
    """Presents the authorization URL and reports the callback URL.

    Implementations raise :class:`UserCancelledError` when the user abandons
    the flow and any other exception when the session itself fails.
    """

    async def open(
        self, authorization_url: str, callback_scheme: str, ephemeral: bool
    ) -> str: ...


class BrowserInteractiveSession:
    """Opens the system browser and asks the user to paste the redirect URL.

    Works in any environment: when the browser cannot be opened the URL is
    printed for manual use, and the redirect target does not need to be
    reachable since the user copies it from the address bar.

    The prompt runs in a worker thread, which cannot be interrupted. If the
    caller gives up on ``open`` (an ``interactive_timeout`` or a cancelled
    task), that thread stays blocked on console input until the user presses
    Enter, and the line read is discarded.
    """

    def __init__(
        self,
        console: Console | None = None,
        open_browser: Callable[[str], bool] = webbrowser.open,
    ):
        self.console = console or Console(stderr=True)
        self._open_browser = open_browser

    def _prompt(self, callback_scheme: str) -> str:
        return self.console.input(
            f"Paste the URL starting with [bold]{callback_scheme}[/bold] "
            "(leave empty to cancel): "
        )

    async def open(
        self, authorization_url: str, callback_scheme: str, ephemeral: bool
    ) -> str:
        logger.info("oauth_browser_opening", ephemeral=ephemeral)
        if ephemeral:
            logger.debug(
                "oauth_ephemeral_ignored",
                reason="system browser sessions cannot be made ephemeral",
            )
        opened = self._open_browser(authorization_url)
        if not opened:
            logger.warning("oauth_browser_unavailable")
        self.console.print(
            "If your browser didn't open, visit this URL to authorize:",
            style="cyan",
        )
        self.console.print(authorization_url, soft_wrap=True)

        response = (await asyncio.to_thread(self._prompt, callback_scheme)).strip()
        if not response:
            raise UserCancelledError()
        if not response.startswith(callback_scheme):
            raise InteractiveSessionError(
                f"Callback URL does not match expected scheme {callback_scheme}"
            )
        return response
