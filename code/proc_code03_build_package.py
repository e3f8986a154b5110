#!/usr/bin/env python3
"""proc_code03_build_package

Build the CLI package itself (always runs, no skip flag):
  a) remove <package root>/dist if present
  b) ``npm run clean``       (output discarded)
  c) ``npm run build``       (error lines shown, warning lines excluded)
  d) ``npm run copy-files``  (output discarded)
  e) check that dist/bin/cli.js exists

Bundlers like to print warnings such as "no errors in source map"; lines that
also mention "warn" are therefore not highlighted as errors.
"""
from __future__ import annotations
import argparse, sys
from pathlib import Path

from util_code01_build_io import (
    BuildAbort, WARNING_PATTERN, detail, pushd, remove_path, report_tool, require_file, run_tool,
)
from util_code03_layout import BuildLayout, BuildOptions, add_layout_args, layout_from_args, options_from_args


def build_package(layout: BuildLayout, options: BuildOptions) -> Path:
    cmds = layout.commands
    with pushd(layout.package_root):
        if remove_path(layout.out_dir):
            detail(f"removed {layout.out_dir}")
        report_tool(run_tool('cleanup', cmds.cleanup, options.timeout), options, mode='quiet')
        report_tool(run_tool('build', cmds.build, options.timeout), options, exclude=WARNING_PATTERN)
        report_tool(run_tool('copy files', cmds.copy_files, options.timeout), options, mode='quiet')
    binary = require_file(layout.binary_entry, 'binary entry file')
    detail(f"binary: {binary}", 'ok')
    return binary


def main(argv=None):
    ap = add_layout_args(argparse.ArgumentParser(description='Build the CLI package only'))
    args = ap.parse_args(argv)
    try:
        build_package(layout_from_args(args), options_from_args(args))
    except BuildAbort as e:
        print(f"[FATAL] {e}")
        return 1
    return 0

if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
