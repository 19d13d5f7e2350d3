"""Logging setup: stdlib logging routed through rich."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
	"""Configure the ``repomap`` logger with a rich handler on stderr.

	Warnings are shown by default, ``verbose`` enables DEBUG and ``quiet``
	keeps only errors.
	"""
	if quiet:
		level = logging.ERROR
	elif verbose:
		level = logging.DEBUG
	else:
		level = logging.WARNING

	handler = RichHandler(
		console=Console(stderr=True),
		rich_tracebacks=True,
		markup=False,
		show_time=verbose,
		show_path=verbose,
	)
	logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler])

	logger = logging.getLogger("repomap")
	logger.setLevel(level)
	return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
	if name is None:
		return logging.getLogger("repomap")
	if not name.startswith("repomap"):
		name = f"repomap.{name}"
	return logging.getLogger(name)
