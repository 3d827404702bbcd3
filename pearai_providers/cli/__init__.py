"""PearAI command line interface (package entrypoint).

Wires argument parsing to the handlers in ``cli_actions``.

Public API:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from ..base.logging import configure_logger
from .cli_actions import ClientFactory, run_command
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None, *, client_factory: Optional[ClientFactory] = None) -> int:
	"""CLI entrypoint.

	Parameters
	----------
	argv: Optional[list[str]]
		Argument vector; when ``None`` uses ``sys.argv[1:]``.
	client_factory: Optional[ClientFactory]
		Builds the client from parsed arguments (tests inject fakes here).

	Returns
	-------
	int
		Process exit code (0 success, 1 provider error, 2 usage accounting disabled).
	"""
	args = build_parser().parse_args(list(sys.argv[1:] if argv is None else argv))
	if args.log_level is not None or args.log_file is not None:
		configure_logger(level=args.log_level, file_path=args.log_file)
	return run_command(args, client_factory)


__all__ = ["main"]
