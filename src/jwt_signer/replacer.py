"""
Placeholder substitution.

Placeholders look like ``{http.request.header.X-User}``. Unknown placeholders
expand to the empty string, and ``\\{`` / ``\\}`` produce literal braces.
"""

import os
import re
import time
from typing import Any, Callable, Dict, Optional, Protocol

from starlette.requests import Request

_PLACEHOLDER = re.compile(r"\\([{}])|\{([^{}]+)\}")

# Short forms accepted in configuration, mapped to their full names.
SHORTHANDS = {
    "dir": "http.request.uri.path.dir",
    "file": "http.request.uri.path.file",
    "host": "http.request.host",
    "hostport": "http.request.hostport",
    "method": "http.request.method",
    "path": "http.request.uri.path",
    "port": "http.request.port",
    "query": "http.request.uri.query",
    "remote": "http.request.remote",
    "remote_host": "http.request.remote.host",
    "remote_port": "http.request.remote.port",
    "scheme": "http.request.scheme",
    "uri": "http.request.uri",
}

SHORTHAND_PREFIXES = {
    "header.": "http.request.header.",
    "query.": "http.request.uri.query.",
    "cookie.": "http.request.cookie.",
}

Provider = Callable[[str], Optional[str]]


class SubstitutionContext(Protocol):
    """What the claim expander and signer need from a placeholder resolver."""

    def expand(self, template: str) -> str:
        ...

    def publish(self, name: str, value: str) -> None:
        ...


def _env_provider(name: str) -> Optional[str]:
    return os.environ.get(name)


class Replacer:
    """Resolve placeholders from static values and prefix providers."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, str] = {}
        self._providers: Dict[str, Provider] = {"env.": _env_provider}
        for name, value in (values or {}).items():
            self.set(name, value)

    def set(self, name: str, value: Any) -> None:
        self._values[_canonical_name(name)] = value

    def publish(self, name: str, value: str) -> None:
        self.set(name, value)

    def add_provider(self, prefix: str, provider: Provider) -> None:
        self._providers[prefix] = provider

    def get(self, name: str) -> Optional[str]:
        name = _canonical_name(name)

        if name in self._values:
            value = self._values[name]
            return None if value is None else str(value)

        for prefix, provider in self._providers.items():
            if name.startswith(prefix):
                value = provider(name[len(prefix):])
                if value is not None:
                    return str(value)

        return None

    def expand(self, template: str, empty: str = "") -> str:
        """Replace every placeholder in ``template``; unknown ones become ``empty``."""

        def _sub(match: "re.Match[str]") -> str:
            if match.group(1) is not None:
                return match.group(1)
            value = self.get(match.group(2))
            return empty if value is None else value

        return _PLACEHOLDER.sub(_sub, template)

    @classmethod
    def for_request(cls, request: Request) -> "Replacer":
        """Build a replacer exposing the values of an incoming request."""
        url = request.url
        client = request.client
        path = url.path
        dir_, _, file_ = path.rpartition("/")

        repl = cls(
            {
                "http.request.method": request.method,
                "http.request.scheme": url.scheme,
                "http.request.host": url.hostname or "",
                "http.request.hostport": url.netloc,
                "http.request.port": str(url.port) if url.port else "",
                "http.request.uri": f"{path}?{url.query}" if url.query else path,
                "http.request.uri.path": path,
                "http.request.uri.path.dir": dir_ + "/",
                "http.request.uri.path.file": file_,
                "http.request.uri.query": url.query,
                "http.request.remote": f"{client.host}:{client.port}" if client else "",
                "http.request.remote.host": client.host if client else "",
                "http.request.remote.port": str(client.port) if client else "",
            }
        )
        # Starlette headers are already case insensitive
        repl.add_provider("http.request.header.", request.headers.get)
        repl.add_provider("http.request.uri.query.", request.query_params.get)
        repl.add_provider("http.request.cookie.", request.cookies.get)
        repl.add_provider("time.now.", _time_provider)
        return repl


def _time_provider(name: str) -> Optional[str]:
    if name == "unix":
        return str(int(time.time()))
    if name == "unix_ms":
        return str(int(time.time() * 1000))
    return None


def _canonical_name(name: str) -> str:
    if name in SHORTHANDS:
        return SHORTHANDS[name]
    for short, full in SHORTHAND_PREFIXES.items():
        if name.startswith(short):
            return full + name[len(short):]
    return name
