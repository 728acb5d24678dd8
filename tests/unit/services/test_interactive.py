# tests/unit/services/test_interactive.py
"""Tests for the browser-based interactive session."""

from unittest.mock import MagicMock

import pytest
from rich.console import Console

from twiauth.exceptions import InteractiveSessionError, UserCancelledError
from twiauth.services.interactive import BrowserInteractiveSession, InteractiveSession


AUTHORIZE_URL = "https://api.twitter.com/oauth/authorize?oauth_token=req-token"
CALLBACK_SCHEME = "myapp://twiAuth"


@pytest.fixture
def console() -> MagicMock:
    return MagicMock(spec=Console)


@pytest.fixture
def open_browser() -> MagicMock:
    return MagicMock(return_value=True)


@pytest.fixture
def session(console: MagicMock, open_browser: MagicMock) -> BrowserInteractiveSession:
    return BrowserInteractiveSession(console=console, open_browser=open_browser)


class TestBrowserInteractiveSession:
    """Tests for opening the browser and reading the callback URL."""

    def test_implements_protocol(self, session: BrowserInteractiveSession) -> None:
        assert isinstance(session, InteractiveSession)

    async def test_returns_pasted_callback(
        self,
        session: BrowserInteractiveSession,
        console: MagicMock,
        open_browser: MagicMock,
    ) -> None:
        console.input.return_value = (
            "  myapp://twiAuth?oauth_token=req-token&oauth_verifier=v  \n"
        )

        result = await session.open(AUTHORIZE_URL, CALLBACK_SCHEME, True)

        assert result == "myapp://twiAuth?oauth_token=req-token&oauth_verifier=v"
        open_browser.assert_called_once_with(AUTHORIZE_URL)
        assert CALLBACK_SCHEME in console.input.call_args.args[0]

    async def test_prints_url_when_browser_unavailable(
        self,
        session: BrowserInteractiveSession,
        console: MagicMock,
        open_browser: MagicMock,
    ) -> None:
        open_browser.return_value = False
        console.input.return_value = "myapp://twiAuth?oauth_token=t&oauth_verifier=v"

        await session.open(AUTHORIZE_URL, CALLBACK_SCHEME, False)

        printed = [call.args[0] for call in console.print.call_args_list]
        assert AUTHORIZE_URL in printed

    async def test_empty_input_cancels(
        self, session: BrowserInteractiveSession, console: MagicMock
    ) -> None:
        console.input.return_value = "   "

        with pytest.raises(UserCancelledError):
            await session.open(AUTHORIZE_URL, CALLBACK_SCHEME, True)

    async def test_wrong_scheme_rejected(
        self, session: BrowserInteractiveSession, console: MagicMock
    ) -> None:
        console.input.return_value = "https://evil.example.com/?oauth_token=t"

        with pytest.raises(InteractiveSessionError, match="expected scheme"):
            await session.open(AUTHORIZE_URL, CALLBACK_SCHEME, True)
