import io
from unittest.mock import AsyncMock
from unittest.mock import MagicMock
from unittest.mock import patch

import pytest

from enrollme.__main__ import build_parser
from enrollme.__main__ import main
from enrollme.__main__ import read_argv
from enrollme.__main__ import resolve_sections
from enrollme.error import ConfigError
from enrollme.module.enroll_bot import EnrollBot


class StubConfig:
    sections: list[str] = []


def test_read_argv_prefers_arguments(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("-u ignored\n"))

    assert read_argv(["-u", "triton"]) == ["-u", "triton"]


def test_read_argv_falls_back_to_stdin(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("-u triton  -p hunter2 -s 123456 654321 -m 1\n"))

    args = build_parser().parse_args(read_argv([]))

    assert args.username == "triton"
    assert args.password == "hunter2"
    assert args.sections == ["123456", "654321"]
    assert args.max_enroll == 1


def test_resolve_sections_priority(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "sections.yaml").write_text("- 333333\n")
    conf = StubConfig()
    parser = build_parser()

    assert resolve_sections(parser.parse_args(["-s", "111111"]), conf) == ["111111"]

    conf.sections = ["222222"]
    assert resolve_sections(parser.parse_args([]), conf) == ["222222"]

    conf.sections = []
    assert resolve_sections(parser.parse_args([]), conf) == ["333333"]


def test_resolve_sections_none_given(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigError):
        resolve_sections(build_parser().parse_args([]), StubConfig())


def make_conf(**overrides):
    conf = MagicMock()
    conf.username = "triton"
    conf.password = "hunter2"
    conf.sections = []
    conf.enroll_max = None
    conf.headless = True
    for key, value in overrides.items():
        setattr(conf, key, value)
    return conf


async def run_main(argv, conf):
    with (
        patch("enrollme.__main__.Config", return_value=conf),
        patch("enrollme.__main__.logger") as mock_logger,
        patch.object(EnrollBot, "start", new_callable=AsyncMock) as mock_start,
    ):
        await main(argv)
    return mock_logger, mock_start


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "argv, overrides, message",
    [
        (["-s", "123456"], {"username": None, "password": None}, "Username and password are required"),
        (["-s", "", " "], {}, "No sections to enroll in."),
        (["-s", "123456", "-m", "0"], {}, "Maximum enrollments must be positive, got 0."),
        (["-s", "123456"], {"enroll_max": 0}, "Maximum enrollments must be positive, got 0."),
    ],
)
async def test_main_config_errors(argv, overrides, message):
    mock_logger, mock_start = await run_main(argv, make_conf(**overrides))

    mock_start.assert_not_awaited()
    error = mock_logger.error.call_args.args[0]
    assert isinstance(error, ConfigError)
    assert message in str(error)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "argv, enroll_max, expected_cap",
    [
        (["-s", "111111", "222222", "333333"], None, 3),
        (["-s", "111111", "222222", "333333"], 2, 2),
        (["-s", "111111", "222222", "333333", "-m", "1"], 2, 1),
    ],
)
async def test_main_cap_fallback(argv, enroll_max, expected_cap):
    mock_logger, mock_start = await run_main(argv, make_conf(enroll_max=enroll_max))

    mock_start.assert_awaited_once_with(
        "triton", "hunter2", ["111111", "222222", "333333"], expected_cap
    )
    mock_logger.error.assert_not_called()


@pytest.mark.asyncio
async def test_main_arguments_override_config():
    conf = make_conf()

    mock_logger, mock_start = await run_main(
        ["-u", "other", "-p", "secret", "-s", "111111", "111111", "--headed"], conf
    )

    mock_start.assert_awaited_once_with("other", "secret", ["111111"], 1)
    assert conf.headless is False
