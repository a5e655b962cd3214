"""Configuration model, defaults and loading from a YAML file."""

import types
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Union, get_args, get_origin

import yaml

METADATA_FOLDER = "./distribyted-data/metadata"
MOUNT_FOLDER = "./distribyted-data/mount"
LOGS_FOLDER = "./distribyted-data/logs"
SERVER_FOLDER = "./distribyted-data/served-folders/server"

_DEFAULT_MAGNETS = (
    "magnet:?xt=urn:btih:c9e15763f722f23e98a29decdfae341b98d53056&dn=Cosmos+Laundromat",
    "magnet:?xt=urn:btih:dd8255ecdc7ca55fb0bbf81323d87062db1f6d1c&dn=Big+Buck+Bunny",
    "magnet:?xt=urn:btih:08ada5a7a6183aae1e09d831df6748d566095a10&dn=Sintel",
    "magnet:?xt=urn:btih:209c8226b299b308beaf2b9cd3fb49212dbd13ec&dn=Tears+of+Steel",
    "magnet:?xt=urn:btih:a88fda5954e89178c372716a6a78b8180ed4dad3"
    "&dn=The+WIRED+CD+-+Rip.+Sample.+Mash.+Share",
)

_DEFAULT_TRACKERS = (
    "wss://tracker.example.com",
    "udp://tracker.example.com:1337/announce",
    "http://tracker.example.com:80/announce",
)

# The WebDAV credential field is stored under this key in the YAML file.
_WEBDAV_PASS_META = {"yaml": "pass"}


class ConfigError(ValueError):
    """The configuration could not be read or parsed."""


@dataclass
class Log:
    debug: bool = False
    max_backups: int = 0
    max_size: int = 0
    max_age: int = 0
    path: str = ""


@dataclass
class TorrentGlobal:
    read_timeout: int = 0
    continue_when_add_timeout: bool = False
    add_timeout: int = 0
    global_cache_size: int = 0
    metadata_folder: str = ""
    disable_ipv6: bool = False
    disable_tcp: bool = False
    disable_utp: bool = False
    ip: str = ""


@dataclass
class WebDAVGlobal:
    port: int = 0
    user: str = ""
    password: str = field(default_factory=str, metadata=_WEBDAV_PASS_META)


@dataclass
class HTTPGlobal:
    port: int = 0
    ip: str = ""
    httpfs: bool = False


@dataclass
class FuseGlobal:
    allow_other: bool = False
    path: str = ""


@dataclass
class Torrent:
    magnet_uri: str = ""
    torrent_path: str = ""


@dataclass
class Route:
    name: str = ""
    torrents: list[Torrent] = field(default_factory=list)
    torrent_folder: str = ""


@dataclass
class Server:
    name: str = ""
    path: str = ""
    trackers: list[str] = field(default_factory=list)
    tracker_url: str = ""


@dataclass
class Root:
    """The whole configuration file."""

    http: HTTPGlobal | None = None
    webdav: WebDAVGlobal | None = None
    torrent: TorrentGlobal | None = None
    fuse: FuseGlobal | None = None
    log: Log | None = None
    routes: list[Route] = field(default_factory=list)
    servers: list[Server] = field(default_factory=list)


def default_config() -> Root:
    """The configuration written when no configuration file exists."""
    password = "password"
    return Root(
        http=HTTPGlobal(port=4444, ip="0.0.0.0", httpfs=True),
        webdav=WebDAVGlobal(port=36911, user="admin", password=password),
        torrent=TorrentGlobal(
            global_cache_size=2048,
            metadata_folder=METADATA_FOLDER,
            add_timeout=60,
            read_timeout=120,
            continue_when_add_timeout=False,
        ),
        fuse=FuseGlobal(allow_other=False, path=MOUNT_FOLDER),
        log=Log(path=LOGS_FOLDER, max_backups=2, max_size=50),
        routes=[
            Route(
                name="multimedia",
                torrents=[Torrent(magnet_uri=m) for m in _DEFAULT_MAGNETS],
            )
        ],
        servers=[
            Server(name="server", path=SERVER_FOLDER, trackers=list(_DEFAULT_TRACKERS))
        ],
    )


def add_defaults(root: Root) -> Root:
    """Fill unset values with defaults, in place, and return the same object."""
    if root.torrent is None:
        root.torrent = TorrentGlobal()
    if root.torrent.add_timeout == 0:
        root.torrent.add_timeout = 60
    if root.torrent.read_timeout == 0:
        root.torrent.read_timeout = 120
    if root.torrent.global_cache_size == 0:
        root.torrent.global_cache_size = 2048  # megabytes
    if not root.torrent.metadata_folder:
        root.torrent.metadata_folder = METADATA_FOLDER

    if root.fuse is not None and not root.fuse.path:
        root.fuse.path = MOUNT_FOLDER

    if root.http is None:
        root.http = HTTPGlobal()
    if not root.http.ip:
        root.http.ip = "0.0.0.0"

    if root.log is None:
        root.log = Log()

    return root


def _yaml_key(f: Any) -> str:
    return f.metadata.get("yaml", f.name)


def _convert(tp: Any, value: Any, where: str) -> Any:
    origin = get_origin(tp)
    if origin in (Union, types.UnionType):
        if value is None:
            return None
        inner = next(arg for arg in get_args(tp) if arg is not type(None))
        return _convert(inner, value, where)
    if origin is list:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ConfigError(f"{where}: expected a sequence")
        (item_type,) = get_args(tp)
        return [_convert(item_type, item, f"{where}[{i}]") for i, item in enumerate(value)]
    if is_dataclass(tp):
        return _decode(tp, value, where)
    if tp is bool:
        if value is None:
            return False
        if not isinstance(value, bool):
            raise ConfigError(f"{where}: expected a boolean, got {value!r}")
        return value
    if tp is int:
        if value is None:
            return 0
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{where}: expected an integer, got {value!r}")
        return value
    if tp is str:
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            raise ConfigError(f"{where}: expected a scalar")
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)
    raise ConfigError(f"{where}: unsupported type")


def _decode(cls: type, data: Any, where: str) -> Any:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: expected a mapping")
    kwargs = {}
    for f in fields(cls):
        key = _yaml_key(f)
        if key in data:
            kwargs[f.name] = _convert(f.type, data[key], f"{where}.{key}")
    return cls(**kwargs)


def _encode(value: Any) -> Any:
    if is_dataclass(value):
        return {
            _yaml_key(f): _encode(getattr(value, f.name))
            for f in fields(value)
            if getattr(value, f.name) is not None
        }
    if isinstance(value, list):
        return [_encode(item) for item in value]
    return value


def _dump_config(root: Root) -> bytes:
    return yaml.safe_dump(_encode(root), sort_keys=False).encode("utf-8")


def parse_config(data: bytes | str) -> Root:
    """Parse YAML configuration text into a Root, without applying defaults."""
    try:
        loaded = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise ConfigError(f"error parsing configuration file: {exc}") from exc
    if loaded is None:
        return Root()
    try:
        return _decode(Root, loaded, "config")
    except ConfigError as exc:
        raise ConfigError(f"error parsing configuration file: {exc}") from exc


class ConfigHandler:
    """Reads the configuration file, creating it from defaults if missing."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _create_from_template(self) -> bytes:
        content = _dump_config(default_config())
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(
                f"error creating path for configuration file: {self.path}, {exc}"
            ) from exc
        self.path.write_bytes(content)
        return content

    def get_raw(self) -> bytes:
        """Return the file's bytes, writing the default file first if absent."""
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            print(
                "configuration file does not exist, creating from template file:",
                self.path,
            )
            return self._create_from_template()
        except OSError as exc:
            raise ConfigError(f"error reading configuration file: {exc}") from exc

    def get(self) -> Root:
        """Return the parsed configuration with defaults applied."""
        return add_defaults(parse_config(self.get_raw()))