import pytest

from distribyted.config import (
    METADATA_FOLDER,
    MOUNT_FOLDER,
    ConfigError,
    ConfigHandler,
    FuseGlobal,
    HTTPGlobal,
    Log,
    Root,
    TorrentGlobal,
    add_defaults,
    default_config,
    parse_config,
)


def test_template_config(tmp_path):
    path = tmp_path / "config" / "config.yaml"
    handler = ConfigHandler(path)

    conf = handler.get()
    assert path.exists()
    assert conf == default_config()

    assert parse_config(path.read_bytes()) == default_config()


def test_defaults():
    dr = add_defaults(Root())

    assert dr.fuse is None
    assert dr.http == HTTPGlobal(ip="0.0.0.0")
    assert dr.log == Log()
    assert dr.torrent.add_timeout == 60
    assert dr.torrent.read_timeout == 120
    assert dr.torrent.global_cache_size == 2048
    assert dr.torrent.metadata_folder == METADATA_FOLDER

    dr = add_defaults(Root(fuse=FuseGlobal()))
    assert dr.fuse.path == MOUNT_FOLDER


def test_defaults_keep_existing_values():
    root = Root(
        torrent=TorrentGlobal(add_timeout=5, read_timeout=7, global_cache_size=10),
        http=HTTPGlobal(ip="127.0.0.1"),
        fuse=FuseGlobal(path="/mnt/here"),
    )
    result = add_defaults(root)
    assert result is root
    assert result.torrent.add_timeout == 5
    assert result.torrent.read_timeout == 7
    assert result.torrent.global_cache_size == 10
    assert result.http.ip == "127.0.0.1"
    assert result.fuse.path == "/mnt/here"


def test_parse_config_fields():
    text = """
http:
  port: 8080
  httpfs: true
webdav:
  port: 1234
  user: admin
  pass: password
torrent:
  disable_ipv6: true
unknown_key: 3
routes:
  - name: movies
    torrent_folder: /torrents
    torrents:
      - magnet_uri: "magnet:?xt=urn:btih:c9e15763f722f23e98a29decdfae341b98d53056"
servers:
  - name: srv
    path: /data
    trackers: ["udp://tracker.example.com:1337/announce"]
"""
    root = parse_config(text)
    assert root.http == HTTPGlobal(port=8080, ip="", httpfs=True)
    assert root.webdav.port == 1234
    assert root.webdav.user == "admin"
    assert root.webdav.password == "password"
    assert root.torrent.disable_ipv6 is True
    assert root.fuse is None
    assert root.routes[0].name == "movies"
    assert root.routes[0].torrent_folder == "/torrents"
    assert root.routes[0].torrents[0].magnet_uri.endswith("d53056")
    assert root.servers[0].trackers == ["udp://tracker.example.com:1337/announce"]


def test_parse_empty_config():
    assert parse_config("") == Root()


def test_parse_wrong_type_raises():
    with pytest.raises(ConfigError):
        parse_config("http:\n  port: not-a-number\n")


def test_parse_invalid_yaml_raises():
    with pytest.raises(ConfigError):
        parse_config("http: [unclosed\n")


def test_handler_reads_existing_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("http:\n  port: 9999\n")
    conf = ConfigHandler(path).get()
    assert conf.http.port == 9999
    assert conf.http.ip == "0.0.0.0"
    assert conf.torrent.add_timeout == 60
    assert ConfigHandler(path).get_raw() == b"http:\n  port: 9999\n"


def test_handler_read_error(tmp_path):
    with pytest.raises(ConfigError):
        ConfigHandler(tmp_path).get_raw()