# distribyted

A read-only virtual filesystem layer. Files from several sources (in-memory
blobs, ZIP archives, and any object with the `Filesystem` interface) are
mounted into one tree and browsed through one API. `.zip` files placed in a
tree that knows about archives are opened transparently and appear as
directories.

On top of that tree sit small adapters shaped for common front ends:

- `distribyted.webdav.WebDAV`: the file operations a WebDAV server needs
  (`open_file`, `stat`, `mkdir`, `remove_all`, `rename`). Files it opens are
  `WebDAVFile` objects with `readdir`, `read`, `read_at`, `seek` and `stat`.
  `write`, `mkdir`, `remove_all` and `rename` raise `OperationNotSupported`.
- `distribyted.httpfs.HTTPFS`: `open(name)` returns an `HTTPFile` that can be
  read, seeked and, for directories, listed with `readdir(count)`.
- `distribyted.mount.MountOperations`: the callbacks of a userspace mount
  (`open`, `opendir`, `getattr`, `read`, `readdir`, `release`,
  `releasedir`), backed by a `FileHandler` that tracks open file handles.
  Failures raise `OSError` carrying `ENOENT`, `EIO` or `ENOSYS`.

## Building a tree

```python
from distribyted.storage import Storage
from distribyted.memory import MemoryFile

storage = Storage()
storage.add(MemoryFile(b"Hello"), "/dir/here.txt")

storage.has("/dir")                   # True
sorted(storage.children("/dir"))      # ['here.txt']
storage.get("/dir/here.txt").read(5)  # b'Hello'
```

Paths are normalised with `distribyted.storage.clean`: they are made
absolute, backslashes become forward slashes, and `.`/`..` segments are
resolved. Adding a file where a regular file already is raises
`FileExistsError`; looking up a missing path raises `FileNotFoundError`.
`Storage(factories)` takes a mapping from file extension to a function that
turns a file into a nested filesystem.

`distribyted.memory.Memory` is a filesystem whose files are added through its
`storage` attribute. `distribyted.container.ContainerFs` mounts a mapping of
filesystems, each under its key, and offers `open(filename)` and
`read_dir(path)`; `.zip` files inside it are expanded as archives.

The interfaces themselves (`File`, `Filesystem`), the `FileInfo` record and
the empty `Dir` node live in `distribyted.files`.

## Archives

`distribyted.archive.Archive(reader, size, loader)` lists the entries of an
archive the first time it is opened or listed. `ZipLoader` reads ZIP data;
`SUPPORTED_FACTORIES` maps `.zip` to it. Each entry is an `ArchiveFile`; its
content is decompressed through `distribyted.iio.DiskTeeReader`, which copies
what it reads to a temporary file so that `read_at(size, offset)` can serve
any offset. `distribyted.iio.SeekerWrapper` adds a position and `seek` to any
object with `read_at`.

## Configuration

Configuration is YAML. `distribyted.config.ConfigHandler(path).get()` reads
the file at `path`, writing the stock configuration there first if the file
does not exist, and returns a `Root` object with defaults applied by
`add_defaults`. `parse_config(data)` parses YAML text without applying
defaults, and `default_config()` returns the stock configuration. Malformed
files raise `ConfigError`.

```yaml
http:
  port: 4444
  ip: 0.0.0.0
  httpfs: true
torrent:
  global_cache_size: 2048
  metadata_folder: ./distribyted-data/metadata
  add_timeout: 60
  read_timeout: 120
log:
  path: ./distribyted-data/logs
  max_backups: 2
  max_size: 50
routes:
  - name: multimedia
    torrent_folder: ./torrents
```

Omitted settings fall back to their defaults: a 60 second add timeout, a
120 second read timeout, a 2048 MB cache, the metadata folder
`./distribyted-data/metadata` and the listen address `0.0.0.0`. The `fuse`
section is optional; when present without a `path`, the mount point defaults
to `./distribyted-data/mount`.

## Sources of torrents

- `distribyted.loaders.ConfigLoader` lists magnet links and `.torrent` paths
  given per route in the configuration.
- `distribyted.loaders.FolderLoader` walks each route's `torrent_folder` for
  `.torrent` files.
- `distribyted.magnetdb.MagnetDB(directory)` persists magnet links in an
  SQLite file inside `directory`, keyed by info hash and route.
  `add_magnet` raises `MagnetError` for a link it cannot parse;
  `remove_from_hash(route, info_hash)` returns whether an entry was removed.
  `parse_magnet_info_hash(uri)` returns the lowercase hex info hash of a
  magnet link.

## Other helpers

- `distribyted.peerid.get_or_create_peer_id(path)` returns a stable 20-byte
  peer identifier, generating and saving a random one on first use.
- `distribyted.logsetup.setup_logging(config)` sends log records to standard
  output and to a rotating `distribyted.log` file in the `log` section's
  path, at debug level when `debug` is set.

## What this package does not do

It has no command to run and starts no servers. It does not download or
seed torrents: the loaders and the magnet store only list links and paths,
and nothing turns them into files of the tree. It does not serve WebDAV or
HTTP, nor mount anything through FUSE; `WebDAV`, `HTTPFS` and
`MountOperations` are the file operations such front ends would call. Of the
archive formats only ZIP is read.