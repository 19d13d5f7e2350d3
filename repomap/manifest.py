"""Reading and validating the application manifest (``neira-app.json``)."""

from __future__ import annotations

import json
import os
import re
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ManifestError


MANIFEST_FILENAME = "neira-app.json"

REQUIRED_FIELDS = ("name", "version", "description", "author", "main")
MAP_FIELDS = ("name", "version", "description")
VALID_PERMISSIONS = ("chat", "context", "files", "network", "storage")
VALID_CATEGORIES = ("utility", "productivity", "entertainment", "education", "business", "developer")
MAX_TAGS = 10

_VERSION = re.compile(r"^\d+\.\d+\.\d+$")


class AppManifest(BaseModel):
	"""Every field is optional; unknown keys are kept."""

	model_config = ConfigDict(extra="allow")

	name: Optional[str] = None
	version: Optional[str] = None
	description: Optional[str] = None
	author: Optional[str] = None
	main: Optional[str] = None
	icon: Optional[str] = None
	permissions: Optional[List[str]] = None
	category: Optional[str] = None
	tags: Optional[List[str]] = None


def read_manifest(directory: str) -> Optional[AppManifest]:
	path = os.path.join(directory, MANIFEST_FILENAME)
	if not os.path.isfile(path):
		return None
	try:
		with open(path, "r", encoding="utf-8") as fh:
			data = json.load(fh)
	except (OSError, ValueError) as exc:
		raise ManifestError(f"Could not read {MANIFEST_FILENAME}", {"path": path, "reason": str(exc)}) from exc
	if not isinstance(data, dict):
		raise ManifestError(f"{MANIFEST_FILENAME} must contain a JSON object", {"path": path})
	try:
		return AppManifest.model_validate(data)
	except ValidationError as exc:
		raise ManifestError(f"{MANIFEST_FILENAME} has fields of the wrong type", {"path": path, "reason": str(exc)}) from exc


def missing_map_fields(manifest: Optional[AppManifest]) -> List[str]:
	"""Fields the map command expects to describe the application."""
	if manifest is None:
		return list(MAP_FIELDS)
	return [field for field in MAP_FIELDS if not getattr(manifest, field)]


def validate_manifest(manifest: AppManifest, base_dir: str) -> Tuple[List[str], List[str]]:
	"""Return ``(errors, warnings)`` for a manifest whose files live in ``base_dir``."""
	errors: List[str] = []
	warnings: List[str] = []

	for field in REQUIRED_FIELDS:
		if not getattr(manifest, field):
			errors.append(f'Field "{field}" is required')

	if manifest.name and len(manifest.name) < 3:
		errors.append('Field "name" must be at least 3 characters long')
	if manifest.version and not _VERSION.match(manifest.version):
		errors.append('Field "version" must look like X.Y.Z (for example 1.0.0)')
	if manifest.description and len(manifest.description) < 10:
		warnings.append('Field "description" is short (10 characters or more recommended)')
	if manifest.main and not os.path.exists(os.path.join(base_dir, manifest.main)):
		errors.append(f'Main file "{manifest.main}" not found')

	if not manifest.icon:
		warnings.append("An application icon is recommended")
	elif not os.path.exists(os.path.join(base_dir, manifest.icon)):
		warnings.append(f'Icon file "{manifest.icon}" not found')

	if manifest.permissions:
		invalid = [p for p in manifest.permissions if p not in VALID_PERMISSIONS]
		if invalid:
			errors.append(f"Invalid permissions: {', '.join(invalid)}")
	if manifest.category and manifest.category not in VALID_CATEGORIES:
		warnings.append(f'Unknown category "{manifest.category}". Available: {", ".join(VALID_CATEGORIES)}')
	if manifest.tags and len(manifest.tags) > MAX_TAGS:
		warnings.append(f"Too many tags ({MAX_TAGS} at most recommended)")

	return errors, warnings
