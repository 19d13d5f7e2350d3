from __future__ import annotations

import os

from .errors import ReportWriteError
from .logging_config import get_logger
from .model import WriteResult


logger = get_logger(__name__)


def write_report(path: str, text: str, force: bool = False) -> WriteResult:
	"""Write ``text`` to ``path`` unless it exists and ``force`` is off.

	An existing target is reported through ``already_exists``; only failing
	to create the directory or write the file raises.
	"""
	if os.path.exists(path) and not force:
		logger.warning("%s already exists; use --force to overwrite", path)
		return WriteResult(path=path, written=False, already_exists=True)

	data = text.encode("utf-8")
	parent = os.path.dirname(path)
	try:
		if parent:
			os.makedirs(parent, exist_ok=True)
		with open(path, "wb") as fh:
			fh.write(data)
	except OSError as exc:
		raise ReportWriteError("Could not write report", {"path": path, "reason": str(exc)}) from exc

	logger.info("Wrote %s (%d bytes)", path, len(data))
	return WriteResult(path=path, written=True, size_bytes=len(data), line_count=len(text.split("\n")))
