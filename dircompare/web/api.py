"""
HTTP API for the web viewer.

Provides:
- /api/files/{side} - classified file list of tree A or B
- /api/files/{side}/{file_index}/contents - contents of one file
- /api/summary - comparison counts
"""

from __future__ import annotations

import logging
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from dircompare import APP_DISPLAY_NAME, __version__
from dircompare.core.errors import ContentsUnavailableError, FileIndexError
from dircompare.core.models import display_text
from dircompare.services.file_store import FileStore, Side
from dircompare.services.settings import ServerSettings

log = logging.getLogger("dircompare.api")


class FileInfoResponse(BaseModel):
    """One record of a file list."""
    name: str
    path: str
    extension: str
    size_bytes: int
    comparison_result: str


class FileContentsResponse(BaseModel):
    """Contents of one file."""
    name: str
    path: str
    contents: str


class SummaryResponse(BaseModel):
    """Comparison counts for the pair."""
    folder_a: str
    folder_b: str
    files_a: int
    files_b: int
    baseline: int
    added: int
    removed: int
    modified: int


class CompareAPI:
    """
    HTTP API over a compared FileStore.
    """

    def __init__(self, store: FileStore, settings: Optional[ServerSettings] = None) -> None:
        self.store = store
        self.settings = settings or ServerSettings()
        self.app = FastAPI(title=f"{APP_DISPLAY_NAME} API", version=__version__)

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.cors_origins,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

        self._setup_routes()

    def _resolve_side(self, side: str) -> Side:
        try:
            return Side.from_string(side)
        except ValueError:
            raise HTTPException(status_code=404, detail=f"Unknown side: {side}")

    def _setup_routes(self) -> None:
        """Set up routes."""

        @self.app.get("/api/files/{side}", response_model=List[FileInfoResponse])
        def get_files(side: str) -> List[FileInfoResponse]:
            files = self.store.list_files(self._resolve_side(side))
            return [FileInfoResponse(**vars(info)) for info in files]

        @self.app.get("/api/files/{side}/{file_index}/contents", response_model=FileContentsResponse)
        def get_file_contents(side: str, file_index: int) -> FileContentsResponse:
            resolved = self._resolve_side(side)
            try:
                contents = self.store.read_contents(resolved, file_index)
            except FileIndexError as e:
                log.debug(f"CompareAPI - {e}")
                raise HTTPException(status_code=404, detail=str(e))
            except ContentsUnavailableError as e:
                log.debug(f"CompareAPI - {e}")
                raise HTTPException(status_code=404, detail=str(e))
            return FileContentsResponse(**vars(contents))

        @self.app.get("/api/summary", response_model=SummaryResponse)
        def get_summary() -> SummaryResponse:
            summary = self.store.current_summary()
            return SummaryResponse(
                folder_a=display_text(self.store.files_a.root_path),
                folder_b=display_text(self.store.files_b.root_path),
                files_a=summary.files_a,
                files_b=summary.files_b,
                baseline=summary.baseline_count,
                added=summary.added_count,
                removed=summary.removed_count,
                modified=summary.modified_count,
            )


def create_app(store: FileStore, settings: Optional[ServerSettings] = None) -> FastAPI:
    """Build the FastAPI application for a store."""
    return CompareAPI(store, settings).app


def run_server(store: FileStore, settings: Optional[ServerSettings] = None, log_level: str = "info") -> None:
    """Serve the API until interrupted."""
    settings = settings or ServerSettings()
    app = create_app(store, settings)

    print(f"Starting web server on http://{settings.host}:{settings.port}")
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level=log_level.lower(),
    )
    server = uvicorn.Server(config)
    server.run()
