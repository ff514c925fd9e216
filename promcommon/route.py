"""HTTP routing with path prefixes, request parameters and handler instrumentation."""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from werkzeug.exceptions import HTTPException, NotFound
from werkzeug.routing import Map, RequestRedirect, Rule
from werkzeug.utils import redirect as _redirect_response
from werkzeug.wrappers import Request, Response

from .static_file_server import _not_found, _serve_path

__all__ = ["Router", "param", "with_param", "file_serve"]

Handler = Callable[[Request], Optional[Response]]
Instrumenter = Callable[[str, Handler], Handler]

_PARAMS_KEY = "promcommon.route.params"
_NAMED_PARAM_RE = re.compile(r":(\w+)")
_CATCH_ALL_RE = re.compile(r"\*(\w+)$")


def _environ_of(source: Union[Request, Mapping[str, Any]]) -> Mapping[str, Any]:
    return getattr(source, "environ", source)


def param(request: Union[Request, Mapping[str, Any]], name: str) -> str:
    """Return the route parameter name of the request, or "" if it is not set."""
    return _environ_of(request).get(_PARAMS_KEY, {}).get(name, "")


def with_param(environ: Mapping[str, Any], name: str, value: str) -> dict[str, Any]:
    """Return a copy of environ with the route parameter name set to value."""
    updated = dict(environ)
    params = dict(updated.get(_PARAMS_KEY, {}))
    params[name] = value
    updated[_PARAMS_KEY] = params
    return updated


def _rules_for(path: str) -> tuple[list[Rule], Optional[str]]:
    """Turn a path with :name and trailing *name wildcards into routing rules."""
    catch_all = _CATCH_ALL_RE.search(path)
    base = path[: catch_all.start()] if catch_all else path
    if "*" in base:
        raise ValueError(f"catch-all routes are only allowed at the end of the path in path {path!r}")
    body = _NAMED_PARAM_RE.sub(r"<\1>", base)
    if catch_all is None:
        return [Rule(body, endpoint=path)], None
    if not body.endswith("/"):
        raise ValueError(f"no / before catch-all in path {path!r}")
    name = catch_all.group(1)
    rules = [
        Rule(f"{body}<path:{name}>", endpoint=path),
        Rule(body, endpoint=path, defaults={name: ""}),
    ]
    return rules, name


@dataclass
class _Route:
    catch_all: Optional[str]
    handlers: dict[str, Callable[[Request, dict], Response]] = field(default_factory=dict)


class _Table:
    """The routes shared by a router and the routers derived from it."""

    def __init__(self) -> None:
        self._map = Map(strict_slashes=True, merge_slashes=True, redirect_defaults=False)
        self._routes: dict[str, _Route] = {}

    def add(self, method: str, path: str, handler: Callable[[Request, dict], Response]) -> None:
        if not path.startswith("/"):
            raise ValueError(f"path must begin with '/' in path {path!r}")
        route = self._routes.get(path)
        if route is None:
            rules, catch_all = _rules_for(path)
            for rule in rules:
                self._map.add(rule)
            route = _Route(catch_all)
            self._routes[path] = route
        if method in route.handlers:
            raise ValueError(
                f"a handler is already registered for path {path!r} and method {method}"
            )
        route.handlers[method] = handler

    def dispatch(self, environ: dict) -> Response:
        request = Request(environ)
        adapter = self._map.bind_to_environ(environ)
        try:
            endpoint, values = adapter.match()
        except RequestRedirect as moved:
            code = 301 if request.method == "GET" else 308
            return _redirect_response(moved.new_url, code)
        except NotFound:
            return _not_found()
        except HTTPException as err:
            return err.get_response(environ)

        route = self._routes[endpoint]
        values = dict(values)
        if route.catch_all is not None:
            values[route.catch_all] = "/" + values.get(route.catch_all, "")

        handler = route.handlers.get(request.method)
        if handler is not None:
            return handler(request, values)

        allowed = ", ".join(sorted({*route.handlers, "OPTIONS"}))
        if request.method == "OPTIONS":
            response = Response(status=200)
        else:
            response = Response(
                "Method Not Allowed\n",
                status=405,
                content_type="text/plain; charset=utf-8",
            )
        response.headers["Allow"] = allowed
        return response


class Router:
    """A WSGI router supporting prefixed sub-routers, route parameters and instrumentation."""

    def __init__(self) -> None:
        self._table = _Table()
        self._prefix = ""
        self._instrh: Optional[Instrumenter] = None

    def _derive(self, prefix: str, instrh: Optional[Instrumenter]) -> Router:
        child = Router.__new__(Router)
        child._table = self._table
        child._prefix = prefix
        child._instrh = instrh
        return child

    def with_instrumentation(self, instrh: Instrumenter) -> Router:
        """Return a router whose handlers are wrapped by instrh, after any earlier wrappers."""
        if self._instrh is not None:
            previous, outer = self._instrh, instrh

            def chained(handler_name: str, handler: Handler) -> Handler:
                return outer(handler_name, previous(handler_name, handler))

            instrh = chained
        return self._derive(self._prefix, instrh)

    def with_prefix(self, prefix: str) -> Router:
        """Return a router that prefixes all registered routes with prefix."""
        return self._derive(self._prefix + prefix, self._instrh)

    def _handle(self, handler_name: str, handler: Handler) -> Callable[[Request, dict], Response]:
        if self._instrh is not None:
            handler = self._instrh(handler_name, handler)

        def dispatch(request: Request, values: dict) -> Response:
            environ = dict(request.environ)
            params = dict(environ.get(_PARAMS_KEY, {}))
            params.update(values)
            environ[_PARAMS_KEY] = params
            result = handler(Request(environ))
            return result if result is not None else Response()

        return dispatch

    def _register(self, method: str, path: str, handler: Handler) -> None:
        self._table.add(method, self._prefix + path, self._handle(path, handler))

    def get(self, path: str, handler: Handler) -> None:
        """Register a GET route."""
        self._register("GET", path, handler)

    def options(self, path: str, handler: Handler) -> None:
        """Register an OPTIONS route."""
        self._register("OPTIONS", path, handler)

    def delete(self, path: str, handler: Handler) -> None:
        """Register a DELETE route."""
        self._register("DELETE", path, handler)

    def put(self, path: str, handler: Handler) -> None:
        """Register a PUT route."""
        self._register("PUT", path, handler)

    def post(self, path: str, handler: Handler) -> None:
        """Register a POST route."""
        self._register("POST", path, handler)

    def head(self, path: str, handler: Handler) -> None:
        """Register a HEAD route."""
        self._register("HEAD", path, handler)

    def redirect(self, request: Request, path: str, code: int) -> Response:
        """Return a redirect to the absolute path, prefixed by the router's prefix."""
        return _redirect_response(self._prefix + path, code)

    def __call__(self, environ: dict, start_response: Callable) -> Any:
        return self._table.dispatch(environ)(environ, start_response)


def file_serve(directory: Union[str, os.PathLike]) -> Handler:
    """Return a handler serving files from directory; the route must provide *filepath."""

    def serve(request: Request) -> Response:
        return _serve_path(directory, param(request, "filepath"), request.environ)

    return serve