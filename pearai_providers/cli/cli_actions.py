"""CLI action handlers.

Purpose
-------
Run one parsed subcommand against a :class:`PearAIServerClient` and stream
the output to stdout. The client is created through an injectable factory
so tests can supply one backed by ``httpx.MockTransport``.

Error Semantics
---------------
- ``UsageAccountingDisabled`` -> JSON error on stderr, exit code 2.
- Any other ``ProviderError`` -> JSON error on stderr, exit code 1.
Text already streamed to stdout stays there.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from contextlib import aclosing
from typing import Any, Callable, Dict, Optional

from ..base.errors import ProviderError, UsageAccountingDisabled
from ..base.models import Message
from ..pearai import PearAIServerClient
from ..telemetry import LocalUsageRecorder

ClientFactory = Callable[[argparse.Namespace], PearAIServerClient]

EXIT_OK = 0
EXIT_PROVIDER_ERROR = 1
EXIT_USAGE_DISABLED = 2


def default_client_factory(args: argparse.Namespace) -> PearAIServerClient:
    """Build a client from configuration plus the CLI overrides."""
    kwargs: Dict[str, Any] = {}
    telemetry = getattr(args, "telemetry", None)
    if telemetry is not None:
        kwargs["usage_recorder"] = LocalUsageRecorder(enabled=telemetry)
    return PearAIServerClient(getattr(args, "server_url", None), **kwargs)


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Option overrides given on the command line; unset flags stay ``None``."""
    return {
        "model": args.model,
        "max_tokens": args.max_tokens,
        "temperature": args.temperature,
        "stop": getattr(args, "stop", None),
    }


def _emit_error(err: ProviderError) -> None:
    payload = {"error": err.code.value, "message": err.message, "model": err.model}
    print(json.dumps(payload), file=sys.stderr)


async def _run_complete(client: PearAIServerClient, args: argparse.Namespace) -> None:
    async with aclosing(client.stream_complete(args.prompt, **_overrides(args))) as stream:
        async for chunk in stream:
            sys.stdout.write(chunk)
            sys.stdout.flush()
    sys.stdout.write("\n")


async def _run_chat(client: PearAIServerClient, args: argparse.Namespace) -> None:
    messages = [Message(role="system", content=args.system)] if args.system else []
    messages.append(Message(role="user", content=args.prompt))
    async with aclosing(client.stream_chat(messages, **_overrides(args))) as stream:
        async for delta in stream:
            sys.stdout.write(delta.text_or_joined())
            sys.stdout.flush()
    sys.stdout.write("\n")


async def _run(args: argparse.Namespace, factory: ClientFactory) -> int:
    async with factory(args) as client:
        if args.cmd == "models":
            for name in client.list_models():
                print(name)
            return EXIT_OK
        try:
            if args.cmd == "complete":
                await _run_complete(client, args)
            else:
                await _run_chat(client, args)
        except UsageAccountingDisabled as e:
            _emit_error(e)
            return EXIT_USAGE_DISABLED
        except ProviderError as e:
            _emit_error(e)
            return EXIT_PROVIDER_ERROR
    return EXIT_OK


def run_command(args: argparse.Namespace, client_factory: Optional[ClientFactory] = None) -> int:
    """Execute the parsed subcommand and return the process exit code."""
    return asyncio.run(_run(args, client_factory or default_client_factory))


__all__ = [
    "ClientFactory",
    "EXIT_OK",
    "EXIT_PROVIDER_ERROR",
    "EXIT_USAGE_DISABLED",
    "default_client_factory",
    "run_command",
]
