#!/usr/bin/env python3
"""
runall_proc_code.py

Purpose:
    Build the distributable CLI archive end to end:
    clean -> dependency (sdk) build -> CLI build -> manifest prep -> npm pack + smoke test.

Examples:
    python code/runall_proc_code.py
    python code/runall_proc_code.py --clean
    python code/runall_proc_code.py --skip-dependency-build --cmd-timeout 600

Outputs:
    packages/cli/dist/                 (bundled CLI, publish-ready package.json)
    packages/cli/<name>-<version>.tgz  (archive, installable with npm install -g)

Behaviour:
    - Strictly sequential; the first fatal condition stops the run (exit 1)
    - Fatal: missing artifact after a build step, no archive after packing, bad manifest, tool timeout
    - A failing tool is reported but only fatal with --fail-fast; the artifact check after it decides
    - Smoke test result is informational
    - No retry / resume: rerun from the start (optionally with --clean)
"""
from __future__ import annotations
import argparse, sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from util_code01_build_io import BuildAbort, ToolRun
from util_code02_colors import paint
from util_code03_layout import BuildLayout, BuildOptions, add_layout_args, layout_from_args, options_from_args
from proc_code01_clean_outputs import clean_outputs
from proc_code02_build_dependency import build_dependency
from proc_code03_build_package import build_package
from proc_code04_prepare_manifest import prepare_manifest
from proc_code05_pack_archive import pack_archive, smoke_test

TOTAL_STEPS = 5


@dataclass(frozen=True)
class BuildResult:
    out_dir: Path
    archive: Path
    reported_name: Optional[str]
    manifest: dict
    smoke: Optional[ToolRun]


def step(k: int, msg: str) -> None:
    print(paint(f"[{k}/{TOTAL_STEPS}] {msg}", 'ok'))


def run_pipeline(layout: BuildLayout, options: BuildOptions) -> BuildResult:
    """Run all phases in order. Raises ``BuildAbort`` on the first fatal condition."""
    step(1, 'Cleaning previous outputs' if options.clean else 'Cleaning previous outputs (skipped, no --clean)')
    clean_outputs(layout, options)

    step(2, f"Building dependency package ({layout.dependency_root.name})")
    build_dependency(layout, options)

    step(3, f"Building package ({layout.package_root.name})")
    build_package(layout, options)

    step(4, 'Preparing package manifest')
    manifest = prepare_manifest(layout.manifest)

    step(5, 'Creating archive and verifying binary')
    packed = pack_archive(layout, options)
    smoke = smoke_test(layout, options)

    return BuildResult(out_dir=layout.out_dir, archive=packed.archive, reported_name=packed.reported_name,
                       manifest=manifest, smoke=smoke)


def print_summary(layout: BuildLayout, result: BuildResult) -> None:
    archive = result.archive.resolve()
    print("\n===== SUMMARY (runall) =====")
    print(f"  output dir : {result.out_dir}")
    print(f"  archive    : {archive}")
    print(f"  file name  : {archive.name}")
    hint = ' '.join(list(layout.commands.install_hint) + [f'"{archive}"'])
    print("\n  Install with:")
    print(f"    {hint}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description='Build the CLI package and pack a distributable archive')
    ap.add_argument('--skip-dependency-build', action='store_true', help='reuse the previous dependency (sdk) build')
    ap.add_argument('--clean', action='store_true', help='remove dist/ dirs and old archives before building')
    return add_layout_args(ap)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    layout, options = layout_from_args(args), options_from_args(args)
    try:
        result = run_pipeline(layout, options)
    except BuildAbort as e:
        print(paint(f"[FATAL] {e}", 'err'))
        return 1
    print_summary(layout, result)
    print(paint('[DONE] build complete', 'ok'))
    return 0

if __name__ == '__main__':
    sys.exit(main())
