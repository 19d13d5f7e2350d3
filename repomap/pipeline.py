from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from .config import MapConfig
from .errors import ManifestError
from .fs_scan import scan_repository
from .logging_config import get_logger
from .manifest import MANIFEST_FILENAME, missing_map_fields, read_manifest
from .model import MapResult
from .summarize import render_map


logger = get_logger(__name__)


def manifest_warnings(root: str) -> List[str]:
	try:
		manifest = read_manifest(root)
	except ManifestError as exc:
		return [str(exc)]
	if manifest is None:
		return [f"{MANIFEST_FILENAME} not found; the map will not describe the application"]
	missing = missing_map_fields(manifest)
	if missing:
		return [f"{MANIFEST_FILENAME} is missing: {', '.join(missing)}"]
	return []


def build_map(config: MapConfig, generated_at: Optional[str] = None) -> MapResult:
	"""Scan ``config.root`` and render the map text, without writing it."""
	root = config.resolved_root()
	warnings = manifest_warnings(root)
	for warning in warnings:
		logger.warning(warning)
	files = scan_repository(root, config.effective_include(), list(config.exclude))
	if generated_at is None:
		generated_at = datetime.now(timezone.utc).isoformat()
	return MapResult(files=files, report=render_map(files, generated_at), warnings=warnings)

