"""
Static asset serving with HTTP caching disabled.
"""
from pathlib import PurePath
from typing import Any

from fastapi.staticfiles import StaticFiles
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.types import Scope


class UncachedStaticFiles(StaticFiles):
    """
    StaticFiles that never sends an ETag and never answers 304 Not Modified.
    Dotfiles and anything under a dot-directory (.env, .git/...) are reported as missing.
    """

    def get_path(self, scope: Scope) -> str:
        path = super().get_path(scope)
        if any(part.startswith(".") for part in PurePath(path).parts):
            raise HTTPException(status_code=404)
        return path

    def is_not_modified(self, response_headers: Headers, request_headers: Headers) -> bool:
        return False

    def file_response(self, *args: Any, **kwargs: Any) -> Response:
        response = super().file_response(*args, **kwargs)
        if "etag" in response.headers:
            del response.headers["etag"]
        return response
