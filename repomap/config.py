from __future__ import annotations

import os
from typing import List, Optional

from pydantic import BaseModel


DEFAULT_OUTPUT = "REPOSITORY_MAP.txt"

DEFAULT_INCLUDE: List[str] = [
	"**/*.ts",
	"**/*.tsx",
	"**/*.py",
	"**/*.js",
	"**/*.jsx",
]

DEFAULT_EXCLUDE: List[str] = [
	"**/node_modules/**",
	"**/dist/**",
	"**/.git/**",
	"**/__pycache__/**",
	"**/*.pyc",
	"**/build/**",
	"**/coverage/**",
]


class MapConfig(BaseModel):
	"""Inputs of one repository-map run."""

	root: str = "."
	include: List[str] = list(DEFAULT_INCLUDE)
	exclude: List[str] = list(DEFAULT_EXCLUDE)
	output: Optional[str] = None
	force: bool = False

	def resolved_root(self) -> str:
		return os.path.abspath(self.root)

	def resolved_output(self) -> str:
		# Relative outputs are resolved against the working directory, not the root.
		if self.output:
			return os.path.abspath(self.output)
		return os.path.join(os.getcwd(), DEFAULT_OUTPUT)

	def effective_include(self) -> List[str]:
		return list(self.include) if self.include else list(DEFAULT_INCLUDE)
