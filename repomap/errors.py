"""Exceptions raised by repomap."""

from typing import Dict, Optional


class RepoMapError(Exception):
	"""Base exception for all repomap errors."""

	def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
		super().__init__(message)
		self.message = message
		self.details = details or {}

	def __str__(self) -> str:
		if self.details:
			details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
			return f"{self.message} ({details_str})"
		return self.message


class ReportWriteError(RepoMapError):
	"""The report could not be written to disk."""


class ManifestError(RepoMapError):
	"""The application manifest exists but cannot be read."""


class ToolNotFoundError(RepoMapError):
	"""An external command-line tool is not installed."""
