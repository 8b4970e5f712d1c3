"""Connection settings and `nebula://` URL parsing."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, unquote, urlsplit

from ...core.errors import InterfaceError

logger = logging.getLogger(__name__)

URL_SCHEME = "nebula"
JDBC_PREFIX = "jdbc:"
DEFAULT_PORT = 9669
DEFAULT_CONNECT_TIMEOUT_MS = 3000
DEFAULT_REQUEST_TIMEOUT_MS = 5000

Address = Tuple[str, int]

# URL query keys mapped to settings fields. camelCase keys keep URLs written
# for the JDBC driver working.
_KEY_ALIASES = {
    "user": "user",
    "password": "password",
    "schema": "schema",
    "timezone": "timezone",
    "graph": "graph",
    "graphName": "graph",
    "connect_timeout_ms": "connect_timeout_ms",
    "connectTimeout": "connect_timeout_ms",
    "request_timeout_ms": "request_timeout_ms",
    "requestTimeout": "request_timeout_ms",
}
_INT_FIELDS = {"connect_timeout_ms", "request_timeout_ms"}


@dataclass(frozen=True)
class ConnectionSettings:
    """Everything needed to open and configure one graph session.

    Attributes:
        addresses: `(host, port)` pairs of graph servers; empty when the
            session is created by the caller.
        graph: Graph selected with `SESSION SET GRAPH` after connecting.
        user: Login user name.
        password: Login password, hidden from `repr()`.
        schema: Schema selected with `SESSION SET SCHEMA`.
        timezone: Session time zone set with `SESSION SET TIME ZONE`.
        connect_timeout_ms: Connect timeout handed to the session factory.
        request_timeout_ms: Request timeout handed to the session factory.
        options: Unrecognized URL/keyword options, passed through untouched.
    """

    addresses: Tuple[Address, ...] = ()
    graph: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    schema: Optional[str] = None
    timezone: Optional[str] = None
    connect_timeout_ms: int = DEFAULT_CONNECT_TIMEOUT_MS
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for host, port in self.addresses:
            if not host:
                raise InterfaceError("Server address has an empty host.")
            if not 0 < port < 65536:
                raise InterfaceError(f"Port out of range for host {host!r}: {port}")
        if self.connect_timeout_ms <= 0:
            raise InterfaceError("connect_timeout_ms must be > 0.")
        if self.request_timeout_ms <= 0:
            raise InterfaceError("request_timeout_ms must be > 0.")

    def with_overrides(self, **options: Any) -> ConnectionSettings:
        """Return a copy with known fields replaced and the rest in `options`."""

        known, extra = _split_options(options)
        merged_extra = dict(self.options)
        merged_extra.update(extra)
        return dataclasses.replace(self, options=merged_extra, **known)


def accepts_url(url: Any) -> bool:
    """Return whether `url` looks like `nebula://host:port[,...][/graph]`."""

    if not isinstance(url, str):
        return False
    body = _strip_jdbc_prefix(url)
    prefix = f"{URL_SCHEME}://"
    if not body.startswith(prefix):
        return False
    try:
        netloc = urlsplit(body).netloc
    except ValueError:
        return False
    return bool(netloc.rpartition("@")[2].strip(","))


def parse_url(url: str, defaults: Mapping[str, Any] | None = None) -> ConnectionSettings:
    """Parse a connection URL into settings.

    Args:
        url: `nebula://[user[:password]@]host:port[,host:port...][/graph][?k=v&...]`,
            optionally prefixed by `jdbc:`.
        defaults: Options used when the URL does not set them.

    Returns:
        Validated connection settings. The graph from the URL path wins over
        a `graph` or `graphName` query option.

    Raises:
        InterfaceError: If the URL is not accepted or has a malformed option.
    """

    if not accepts_url(url):
        raise InterfaceError(
            f"URL {url!r} is not accepted; expected "
            f"{URL_SCHEME}://host1:port1,host2:port2/graphName"
        )

    parts = urlsplit(_strip_jdbc_prefix(url))
    userinfo, _, hosts = parts.netloc.rpartition("@")

    merged: Dict[str, Any] = dict(defaults or {})
    merged.update(_parse_query(parts.query))
    if userinfo:
        user, _, password = userinfo.partition(":")
        merged["user"] = unquote(user)
        if password:
            merged["password"] = unquote(password)
    graph = unquote(parts.path.strip("/"))
    if graph:
        merged["graph"] = graph

    known, extra = _split_options(merged)
    return ConnectionSettings(
        addresses=parse_addresses(hosts),
        options=extra,
        **known,
    )


def parse_addresses(text: str) -> Tuple[Address, ...]:
    """Parse `host:port[,host:port...]`; a missing port means `DEFAULT_PORT`."""

    addresses: List[Address] = []
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        addresses.append(_parse_address(item))
    return tuple(addresses)


def session_commands(settings: ConnectionSettings | None) -> List[str]:
    """Return the session configuration statements to run after connecting."""

    if settings is None:
        return []
    commands: List[str] = []
    if settings.schema:
        commands.append(f'SESSION SET SCHEMA "{settings.schema}"')
    if settings.graph:
        commands.append(f"SESSION SET GRAPH {settings.graph}")
    if settings.timezone:
        commands.append(f'SESSION SET TIME ZONE "{settings.timezone}"')
    return commands


def _parse_query(query: str) -> List[Tuple[str, str]]:
    if not query:
        return []
    pairs: List[Tuple[str, str]] = []
    for chunk in query.split("&"):
        try:
            parsed = parse_qsl(chunk, keep_blank_values=True, strict_parsing=True)
        except ValueError:
            parsed = []
        if len(parsed) != 1 or not parsed[0][0].strip() or not parsed[0][1].strip():
            logger.error("cannot parse URL parameter pair: %s", chunk)
            raise InterfaceError(f"Invalid URL parameter: {chunk!r}")
        key, value = parsed[0]
        pairs.append((key.strip(), value.strip()))
    return pairs


def _parse_address(item: str) -> Address:
    if item.startswith("["):
        host, _, rest = item[1:].partition("]")
        port_text = rest[1:] if rest.startswith(":") else ""
    else:
        host, sep, port_text = item.rpartition(":")
        if not sep:
            host, port_text = item, ""
    if not port_text:
        return host, DEFAULT_PORT
    try:
        return host, int(port_text)
    except ValueError:
        raise InterfaceError(f"Invalid port in address {item!r}.") from None


def _split_options(options: Mapping[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    known: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}
    for key, value in options.items():
        name = _KEY_ALIASES.get(key)
        if name is None:
            extra[key] = value
            continue
        if name in _INT_FIELDS:
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise InterfaceError(f"Option {key!r} must be an integer, got {value!r}.") from None
        known[name] = value
    return known, extra


def _strip_jdbc_prefix(url: str) -> str:
    return url[len(JDBC_PREFIX):] if url.startswith(JDBC_PREFIX) else url
