"""CLI parser construction for pearai-cli.

Wires subparsers only; execution lives in ``cli_actions``.
"""

from __future__ import annotations

import argparse


def _str2bool(v: str | None) -> bool:
    """Permissive truthy/falsey parsing; ``None`` (bare flag) means ``True``."""
    if v is None:
        return True
    val = v.strip().lower()
    if val in {"1", "t", "true", "y", "yes", "on"}:
        return True
    return False if val in {"0", "f", "false", "n", "no", "off"} else bool(val)


def add_common_flags(parser: argparse.ArgumentParser) -> None:
    """Attach the flags shared by the streaming subcommands."""
    parser.add_argument("--model", default=None)
    parser.add_argument("--server-url", default=None)
    parser.add_argument(
        "--telemetry",
        nargs="?",
        const=True,
        type=_str2bool,
        default=None,
        help="Consent to usage accounting (required by the server); defaults to PEARAI_TELEMETRY",
    )
    parser.add_argument("--max-tokens", type=int, default=None)
    parser.add_argument("--temperature", type=float, default=None)


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with ``models``, ``complete`` and ``chat``.

    No I/O happens here.
    """
    p = argparse.ArgumentParser(prog="pearai-cli", description="Stream completions from the PearAI server")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    p.add_argument("--log-file", default=None)
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("models", help="List supported models")

    p_complete = sub.add_parser("complete", help="Stream a text completion")
    p_complete.add_argument("--prompt", required=True)
    p_complete.add_argument("--stop", action="append", default=None, help="Stop sequence (repeatable)")
    add_common_flags(p_complete)

    p_chat = sub.add_parser("chat", help="Stream a chat answer to a single prompt")
    p_chat.add_argument("--prompt", required=True)
    p_chat.add_argument("--system", default=None)
    add_common_flags(p_chat)

    return p
