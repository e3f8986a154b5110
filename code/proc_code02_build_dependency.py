#!/usr/bin/env python3
"""proc_code02_build_dependency

Build the prerequisite library (dependency package) the CLI bundles:
  1) code generation   (``npm run generate``)
  2) bundler build     (``npm run build``)
  3) check that <dependency root>/dist/index.js exists

Both tools run inside the dependency root; the previous working directory is
restored afterwards. Only tool output lines mentioning "error" are shown.
``--skip-dependency-build`` reuses whatever a previous run left behind.
"""
from __future__ import annotations
import argparse, sys
from pathlib import Path
from typing import Optional

from util_code01_build_io import BuildAbort, detail, pushd, report_tool, require_file, run_tool
from util_code03_layout import BuildLayout, BuildOptions, add_layout_args, layout_from_args, options_from_args


def build_dependency(layout: BuildLayout, options: BuildOptions) -> Optional[Path]:
    """Run generate + build in the dependency root; return the entry file.

    Returns None (and invokes nothing) when the build is skipped.
    """
    if options.skip_dependency_build:
        detail('[SKIP] dependency build (--skip-dependency-build)', 'warn')
        return None
    cmds = layout.commands
    with pushd(layout.dependency_root):
        report_tool(run_tool('generate', cmds.generate, options.timeout), options)
        report_tool(run_tool('dependency build', cmds.dependency_build, options.timeout), options)
    entry = require_file(layout.dependency_entry, 'dependency entry file')
    detail(f"entry: {entry}", 'ok')
    return entry


def main(argv=None):
    ap = add_layout_args(argparse.ArgumentParser(description='Build the dependency package only'))
    args = ap.parse_args(argv)
    try:
        build_dependency(layout_from_args(args), options_from_args(args))
    except BuildAbort as e:
        print(f"[FATAL] {e}")
        return 1
    return 0

if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
