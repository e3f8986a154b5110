#!/usr/bin/env python3
"""proc_code05_pack_archive

Create the distributable archive and smoke-test the built binary:
  1) ``npm pack --pack-destination ..`` from inside dist/ (archive lands in the package root)
  2) read the archive name npm reports (last line ending in .tgz)
  3) confirm on disk: newest ``*.tgz`` in the package root (by mtime, not name)
  4) ``node dist/bin/cli.js --version``

Step 4 is informational: its output is printed and a non-zero exit is
reported, but the pipeline result does not depend on it.
"""
from __future__ import annotations
import argparse, sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from util_code01_build_io import (
    BuildAbort, ToolRun, detail, newest_match, pushd, report_tool, run_tool,
)
from util_code03_layout import BuildLayout, BuildOptions, add_layout_args, layout_from_args, options_from_args


@dataclass(frozen=True)
class PackResult:
    archive: Path
    reported_name: Optional[str]
    pack_run: ToolRun


def reported_archive_name(output: str, suffix: str = '.tgz') -> Optional[str]:
    """Archive file name as printed by the packaging tool.

    npm prints the tarball name as the last line; any line ending in
    ``suffix`` wins, otherwise the first non-empty line is taken.
    """
    lines = [ln.strip() for ln in output.splitlines() if ln.strip()]
    if not lines:
        return None
    for line in reversed(lines):
        if line.endswith(suffix):
            return line
    return lines[0]


def pack_archive(layout: BuildLayout, options: BuildOptions) -> PackResult:
    cmd = list(layout.commands.pack) + ['..']
    with pushd(layout.out_dir):
        run = run_tool('pack', cmd, options.timeout)
    report_tool(run, options)
    name = reported_archive_name(run.output, layout.archive_suffix)
    if name:
        detail(f"reported: {name}")
    archive = newest_match(layout.package_root, layout.archive_glob)
    if archive is None:
        raise BuildAbort(f"no archive matching {layout.archive_glob} in {layout.package_root}")
    detail(f"archive: {archive}", 'ok')
    return PackResult(archive=archive, reported_name=name, pack_run=run)


def smoke_test(layout: BuildLayout, options: BuildOptions) -> Optional[ToolRun]:
    """Run the binary with the version flag; returns None if it timed out."""
    cmd = list(layout.commands.smoke) + [str(layout.binary_entry), layout.version_flag]
    try:
        run = run_tool('smoke test', cmd, options.timeout)
    except BuildAbort as e:
        detail(f"[WARN] {e}", 'warn')
        return None
    for line in run.output.splitlines():
        detail(f"  {line}")
    if run.ok:
        detail('smoke test: ok', 'ok')
    else:
        detail(f"[WARN] smoke test: rc={run.returncode}", 'warn')
    return run


def main(argv=None):
    ap = add_layout_args(argparse.ArgumentParser(description='Pack dist/ into an archive and smoke-test the binary'))
    args = ap.parse_args(argv)
    layout, options = layout_from_args(args), options_from_args(args)
    try:
        result = pack_archive(layout, options)
    except BuildAbort as e:
        print(f"[FATAL] {e}")
        return 1
    smoke_test(layout, options)
    print(f"[DONE] {result.archive}")
    return 0

if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
