from __future__ import annotations

import os
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from repomap.config import DEFAULT_EXCLUDE, DEFAULT_INCLUDE, MapConfig
from repomap.model import FileStructure
from repomap.pipeline import build_map


app = FastAPI(title="Repository Map")


class MapRequest(BaseModel):
	root_path: str
	include: Optional[List[str]] = None
	exclude: Optional[List[str]] = None


class MapResponse(BaseModel):
	files: List[FileStructure]
	report: str
	warnings: List[str] = []


@app.get("/health")
def health() -> dict:
	return {"status": "ok"}


@app.post("/map", response_model=MapResponse)
def map_repository(req: MapRequest) -> MapResponse:
	root = os.path.abspath(req.root_path)
	if not os.path.isdir(root):
		raise HTTPException(status_code=400, detail=f"Invalid root_path: {root}")

	config = MapConfig(
		root=root,
		include=req.include or list(DEFAULT_INCLUDE),
		exclude=list(DEFAULT_EXCLUDE) if req.exclude is None else req.exclude,
	)
	result = build_map(config)
	return MapResponse(files=result.files, report=result.report, warnings=result.warnings)


def create_app() -> FastAPI:
	return app
