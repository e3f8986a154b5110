#!/usr/bin/env python3
"""proc_code01_clean_outputs

Remove previously generated outputs before a fresh build (``--clean``):
  - <dependency root>/dist and <package root>/dist (recursive, forced)
  - archive files (``*.tgz``) directly under both roots

Absence is success, so the step is idempotent. No confirmation prompt.

Usage:
  python code/proc_code01_clean_outputs.py --package-root packages/cli
"""
from __future__ import annotations
import argparse, sys
from pathlib import Path

from util_code01_build_io import detail, remove_path
from util_code03_layout import BuildLayout, BuildOptions, add_layout_args, layout_from_args


def clean_targets(layout: BuildLayout) -> list[Path]:
    targets = []
    for root in layout.roots:
        targets.append(root / layout.out_dir_name)
        if root.is_dir():
            targets.extend(sorted(root.glob(layout.archive_glob)))
    return targets


def clean_outputs(layout: BuildLayout, options: BuildOptions) -> list[Path]:
    """Delete output dirs and stale archives when ``options.clean`` is set."""
    if not options.clean:
        return []
    removed = []
    for target in clean_targets(layout):
        if remove_path(target):
            detail(f"removed {target}")
            removed.append(target)
    if not removed:
        detail('nothing to clean')
    return removed


def main(argv=None):
    ap = add_layout_args(argparse.ArgumentParser(description='Remove generated build outputs and archives'))
    args = ap.parse_args(argv)
    clean_outputs(layout_from_args(args), BuildOptions(clean=True))
    return 0

if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
