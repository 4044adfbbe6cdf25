from unittest.mock import AsyncMock
from unittest.mock import MagicMock
from unittest.mock import patch

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
import pytest

from enrollme.error import AuthenticationError
from enrollme.error import PageUnresponsiveError
from enrollme.webreg.webreg import WebReg


@pytest.fixture
def webreg():
    conf = MagicMock()
    conf.duo_timeout = 120
    conf.auth_discord_webhook_url = None
    conf.user_id = None

    webreg = WebReg(conf)
    webreg.page = MagicMock()
    webreg.page.goto = AsyncMock()
    webreg.page.fill = AsyncMock()
    webreg.page.press = AsyncMock()
    webreg.page.click = AsyncMock()
    webreg.page.wait_for_load_state = AsyncMock()
    webreg.page.wait_for_url = AsyncMock()
    webreg.page.wait_for_selector = AsyncMock()
    webreg.page.query_selector = AsyncMock(return_value=None)
    return webreg


@pytest.mark.asyncio
async def test_authenticate(webreg):
    await webreg.authenticate("triton", "hunter2")

    webreg.page.goto.assert_awaited_once_with("https://act.ucsd.edu/webreg2/start")
    webreg.page.fill.assert_any_await('input[name="urn:mace:ucsd.edu:sso:username"]', "triton")
    webreg.page.fill.assert_any_await('input[name="urn:mace:ucsd.edu:sso:password"]', "hunter2")
    assert webreg.page.wait_for_url.call_args.kwargs["timeout"] == 120_000
    webreg.page.wait_for_selector.assert_awaited_once_with(
        "#startpage-button-go", state="attached", timeout=5000
    )


@pytest.mark.asyncio
async def test_authenticate_invalid_password(webreg):
    webreg.page.query_selector = AsyncMock(return_value=MagicMock())

    with pytest.raises(AuthenticationError, match="Invalid Password"):
        await webreg.authenticate("triton", "wrong")

    webreg.page.wait_for_url.assert_not_called()


@pytest.mark.asyncio
async def test_authenticate_duo_timeout(webreg):
    webreg.page.wait_for_url = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout exceeded."))

    with pytest.raises(AuthenticationError, match="Failed to authenticate"):
        await webreg.authenticate("triton", "hunter2")


@pytest.mark.asyncio
async def test_authenticate_pings_webhook_for_duo(webreg):
    webreg.config.auth_discord_webhook_url = "http://webhook"
    webreg.config.user_id = "42"

    with patch("enrollme.webreg.webreg.requests.post") as mock_post:
        await webreg.authenticate("triton", "hunter2")

    mock_post.assert_called_once()
    assert mock_post.call_args.kwargs["data"]["content"].startswith("<@42>")


@pytest.mark.asyncio
async def test_open_advanced_search(webreg):
    with patch("enrollme.webreg.webreg.asyncio.sleep", new=AsyncMock()):
        await webreg.open_advanced_search()

    clicked = [call.args[0] for call in webreg.page.click.await_args_list]
    assert clicked == ["#startpage-button-go", "#advanced-search"]


@pytest.mark.asyncio
async def test_wait_for_selector_timeout(webreg):
    webreg.page.wait_for_selector = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout exceeded."))

    with pytest.raises(PageUnresponsiveError):
        await webreg.wait_for_selector(".wr-spinner-loading", timeout_ms=5000, state="detached")


@pytest.mark.asyncio
async def test_wait_until_returns_once_predicate_holds(webreg):
    predicate = AsyncMock(side_effect=[False, False, True])

    await webreg.wait_until(predicate, timeout_ms=5000, poll_ms=1)

    assert predicate.await_count == 3


@pytest.mark.asyncio
async def test_close_before_start():
    await WebReg(MagicMock()).close()
