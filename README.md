# chatlog

A library of small utilities for working with local chat archives.

- **Time points** (`chatlog.timeparse`): `time_of` turns expressions such as `"2020-01-01"`, `"20200101/12:34"`, `"2020Q1"`, `"2020-01"`, `"3d-ago"`, `"yesterday"`, `"this-week"`, Unix timestamps in seconds and RFC 3339 strings into timezone-aware datetimes. `parse_time_point` returns the datetime together with a `Granularity` that says how precisely it was given.
- **Time ranges** (`chatlog.timerange`): `time_range_of` accepts the same expressions, plus `"all"`, `"last-7d"` / `"last-2w"` / `"last-3m"` / `"last-1y"`, and two points joined by `~`, `,` or ` to `. It returns a `(start, end)` pair. A single point is widened to its day, month, quarter or year, and a reversed range is swapped. `adjust_start_time`, `adjust_end_time` and `perfect_time_format` are also available.
- **Decompression** (`chatlog.compress`): `lz4_decompress` handles raw LZ4 blocks and `zstd_decompress` handles zstd frames. Both raise `ValueError` on bad input.
- **wxgf pictures** (`chatlog.wxgf`): `find_data_partition` locates the streams inside a wxgf container. `wxam_to_pic` uses `ffmpeg` to turn the container into JPEG (for a still) or GIF (for an animation).
- **Hashing** (`chatlog.xxhash64`): a pure-Python XXH64. Use the incremental `XXH64` class, or the `xxh64(data)` shortcut.
- **Temp-file naming** (`chatlog.tempnames`): `temp_file_name`, `parse_temp_name`, `cache_key`, `version_key` and related helpers. They build and parse names of the form `instanceID_+baseName_+ext_+pathHash_+dataHash.ext`.
- **Files and strings** (`chatlog.osutil`, `chatlog.textutil`):
  - `find_files_with_patterns`, `default_work_dir`, `get_dir_size`, `byte_count_si` and `prepare_dir`.
  - `is_normal_string`, `must_any_to_int`, `is_numeric`, `split_int64_to_two_int32` and `str_to_list`.
- **Application version** (`chatlog.appver`): `load_app_info` returns an `AppInfo`. On macOS it reads the version and copyright from the `Info.plist` two directories above the binary (`read_plist_info`). On other platforms only the path is filled in.

## Installation

```
pip install .
```

To also install the test dependencies:

```
pip install ".[test]"
```

## Examples

Parse a time point, or a time range:

```python
from chatlog.timeparse import time_of, parse_time_point
from chatlog.timerange import time_range_of

moment = time_of("2020-01-01/12:34")
moment, granularity = parse_time_point("2020Q1")   # Granularity.QUARTER
start, end = time_range_of("2020Q1")   # 2020-01-01 00:00 .. 2020-03-31 23:59:59.999999
```

An unsupported or invalid expression raises `ValueError`:

```python
time_of("2019-02-29")   # ValueError
```

Decompress data and hash it:

```python
from chatlog.compress import zstd_decompress
from chatlog.xxhash64 import xxh64

payload = zstd_decompress(blob)
digest = xxh64(payload).hexdigest()
```

Format a byte count and list matching files:

```python
from chatlog.osutil import byte_count_si, find_files_with_patterns

byte_count_si(1500)   # "1.5 kB"
find_files_with_patterns("/path/to/data", r"\.db$", recursive=True)
```

## ffmpeg

`wxam_to_pic`, `convert_to_jpg` and `convert_anime_to_gif` run `ffmpeg`. Set the `FFMPEG_PATH` environment variable to choose the executable; otherwise `ffmpeg` is looked up on the `PATH`. Without a working ffmpeg, `wxam_to_pic` raises `RuntimeError`. `is_ffmpeg_available` tells whether the configured executable runs.

## What this package does not do

- It has no command-line program. It is a library only.
- It does not decrypt or decode encrypted `.dat` image files. Only wxgf containers are handled.
- It does not watch directories for changes.
- It does not create or manage cached copies of files. `chatlog.tempnames` only builds and parses the names such copies would carry.

## Running the tests

```
pytest
```