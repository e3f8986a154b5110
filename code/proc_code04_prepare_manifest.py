#!/usr/bin/env python3
"""proc_code04_prepare_manifest

Strip build-time-only fields from the generated ``dist/package.json``:
  - ``scripts``         -> ``{}``
  - ``devDependencies`` -> removed (if present)

All other fields pass through unchanged (key order kept). The file is
replaced atomically (write ``package.json.tmp`` then rename), so nothing
downstream can read a half-written manifest. No backup is kept.
"""
from __future__ import annotations
import argparse, json, os, sys
from pathlib import Path

from util_code01_build_io import BuildAbort, detail
from util_code03_layout import add_layout_args, layout_from_args

BUILD_ONLY_FIELDS = ('devDependencies',)


def strip_build_fields(manifest: dict) -> dict:
    """Return a copy of ``manifest`` ready for publishing."""
    out = dict(manifest)
    out['scripts'] = {}
    for key in BUILD_ONLY_FIELDS:
        out.pop(key, None)
    return out


def read_manifest(path: Path) -> dict:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except FileNotFoundError:
        raise BuildAbort(f"manifest not found: {path}") from None
    except (OSError, UnicodeDecodeError) as e:
        raise BuildAbort(f"manifest unreadable: {path} ({e})") from None
    except json.JSONDecodeError as e:
        raise BuildAbort(f"manifest is not valid JSON: {path} (line {e.lineno}, col {e.colno}: {e.msg})") from None
    if not isinstance(data, dict):
        raise BuildAbort(f"manifest must be a JSON object: {path} (got {type(data).__name__})")
    return data


def write_manifest(path: Path, manifest: dict) -> Path:
    path = Path(path)
    tmp = path.with_name(path.name + '.tmp')
    try:
        tmp.write_text(json.dumps(manifest, indent=2, ensure_ascii=False) + '\n', encoding='utf-8')
        os.replace(tmp, path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise BuildAbort(f"manifest could not be written: {path} ({e})") from None
    return path


def prepare_manifest(manifest_path: Path) -> dict:
    manifest = strip_build_fields(read_manifest(manifest_path))
    write_manifest(manifest_path, manifest)
    detail(f"manifest: {manifest_path} (scripts cleared, devDependencies removed)", 'ok')
    return manifest


def main(argv=None):
    ap = add_layout_args(argparse.ArgumentParser(description='Strip build-only fields from dist/package.json'))
    args = ap.parse_args(argv)
    try:
        prepare_manifest(layout_from_args(args).manifest)
    except BuildAbort as e:
        print(f"[FATAL] {e}")
        return 1
    return 0

if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
