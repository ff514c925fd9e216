"""Serving static files with fixed content types for common web assets."""

from __future__ import annotations

import html
import os
import posixpath
from collections.abc import Callable
from typing import Any, Optional, Union
from urllib.parse import quote

from werkzeug.security import safe_join
from werkzeug.utils import send_file
from werkzeug.wrappers import Response

__all__ = ["MIME_TYPES", "static_file_server"]

MIME_TYPES = {
    ".cjs": "application/javascript",
    ".css": "text/css",
    ".eot": "font/eot",
    ".gif": "image/gif",
    ".ico": "image/x-icon",
    ".jpg": "image/jpeg",
    ".js": "application/javascript",
    ".json": "application/json",
    ".less": "text/plain",
    ".map": "application/json",
    ".otf": "font/otf",
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".ttf": "font/ttf",
    ".txt": "text/plain",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
}


def _extension(path: str) -> str:
    base = path.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def _error(text: str, status: int) -> Response:
    response = Response(text, status=status, content_type="text/plain; charset=utf-8")
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def _not_found() -> Response:
    return _error("404 page not found\n", 404)


def _local_redirect(environ: dict, target: str, content_type: Optional[str]) -> Response:
    query = environ.get("QUERY_STRING", "")
    if query:
        target = f"{target}?{query}"
    response = Response(status=301)
    del response.headers["Content-Type"]
    response.headers["Location"] = target
    if content_type:
        response.headers["Content-Type"] = content_type
    return response


def _dir_listing(directory: str) -> Response:
    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError:
        return _error("Error reading directory\n", 500)
    lines = ["<pre>"]
    for entry in entries:
        name = entry.name + ("/" if entry.is_dir() else "")
        lines.append(f'<a href="{html.escape(quote(name))}">{html.escape(name)}</a>')
    lines.append("</pre>")
    return Response(
        "\n".join(lines) + "\n", content_type="text/html; charset=utf-8"
    )


def _serve_path(
    root: Union[str, os.PathLike],
    url_path: str,
    environ: dict,
    content_type: Optional[str] = None,
) -> Response:
    """Serve url_path from the directory root, as a file, an index page or a listing."""
    upath = url_path if url_path.startswith("/") else "/" + url_path
    if upath.endswith("/index.html"):
        return _local_redirect(environ, "./", content_type)

    base = os.fspath(root)
    relative = posixpath.normpath(upath).lstrip("/")
    target = base if relative in ("", ".") else safe_join(base, relative)
    if target is None or not os.path.exists(target):
        return _not_found()

    if os.path.isdir(target):
        if not upath.endswith("/"):
            return _local_redirect(environ, posixpath.basename(upath) + "/", content_type)
        index = os.path.join(target, "index.html")
        if not os.path.isfile(index):
            return _dir_listing(target)
        target = index
    elif upath.endswith("/"):
        return _local_redirect(
            environ, "../" + posixpath.basename(upath.rstrip("/")), content_type
        )

    try:
        response = send_file(target, environ)
    except PermissionError:
        return _error("403 Forbidden\n", 403)
    except OSError:
        return _error("500 Internal Server Error\n", 500)
    if content_type:
        response.headers["Content-Type"] = content_type
    return response


def static_file_server(root: Union[str, os.PathLike]) -> Callable[[dict, Callable], Any]:
    """Return a WSGI app serving files under root, with fixed types for web assets."""

    def app(environ: dict, start_response: Callable) -> Any:
        path = environ.get("PATH_INFO", "") or "/"
        content_type = MIME_TYPES.get(_extension(path))
        response = _serve_path(root, path, environ, content_type)
        return response(environ, start_response)

    return app