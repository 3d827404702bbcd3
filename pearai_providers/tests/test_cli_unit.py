from __future__ import annotations

import json

import httpx

from pearai_providers.cli import main
from pearai_providers.cli.cli_parser import build_parser
from pearai_providers.telemetry import LocalUsageRecorder

from .helpers import ListHandler, ndjson


def test_parser_collects_repeated_stop_flags():
    args = build_parser().parse_args(["complete", "--prompt", "p", "--stop", "a", "--stop", "b", "--telemetry"])
    assert args.stop == ["a", "b"]  # nosec B101
    assert args.telemetry is True  # nosec B101


def test_models_lists_configured_models(make_client, capsys):
    code = main(["models"], client_factory=lambda args: make_client(lambda req: httpx.Response(404)))
    assert code == 0  # nosec B101
    out = capsys.readouterr().out.split()
    assert "gpt-4o" in out and "starcoder-7b" not in out  # nosec B101


def test_complete_streams_to_stdout(make_client, capsys):
    handler = ListHandler(lambda req: httpx.Response(200, content=ndjson('"hello"', '" world"')))
    code = main(
        ["complete", "--prompt", "say hi", "--model", "gpt-4o", "--stop", "a", "--stop", "b", "--stop", "c"],
        client_factory=lambda args: make_client(handler),
    )
    assert code == 0  # nosec B101
    assert capsys.readouterr().out == "hello world\n"  # nosec B101
    assert json.loads(handler.requests[0].content)["stop"] == ["a", "b"]  # nosec B101


def test_chat_with_system_prompt(make_client, capsys):
    handler = ListHandler(lambda req: httpx.Response(200, content=ndjson('{"content": "ok"}')))
    code = main(["chat", "--prompt", "hi", "--system", "short"], client_factory=lambda args: make_client(handler))
    assert code == 0  # nosec B101
    assert capsys.readouterr().out == "ok\n"  # nosec B101
    roles = [m["role"] for m in json.loads(handler.requests[0].content)["messages"]]
    assert roles == ["system", "user"]  # nosec B101


def test_usage_disabled_exits_with_code_2(make_client, capsys):
    factory = lambda args: make_client(  # noqa: E731
        lambda req: httpx.Response(200), usage_recorder=LocalUsageRecorder(enabled=False)
    )
    assert main(["complete", "--prompt", "x"], client_factory=factory) == 2  # nosec B101
    assert '"error": "usage_disabled"' in capsys.readouterr().err  # nosec B101


def test_provider_error_exits_with_code_1(make_client, capsys):
    factory = lambda args: make_client(lambda req: httpx.Response(401, text="nope"))  # noqa: E731
    assert main(["chat", "--prompt", "x"], client_factory=factory) == 1  # nosec B101
    assert '"error": "auth"' in capsys.readouterr().err  # nosec B101
