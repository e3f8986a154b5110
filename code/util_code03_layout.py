"""util_code03_layout

Build configuration shared by ``runall_proc_code`` and the individual
``proc_code`` phase scripts.

Fixed defaults (relative to the working directory, i.e. the monorepo root):
  - dependency package : packages/sdk  (entry  dist/index.js)
  - CLI package        : packages/cli  (binary dist/bin/cli.js, manifest dist/package.json)
  - archives           : packages/cli/*.tgz

Everything is frozen: options and layout are built once from the command
line and passed explicitly to each phase.
"""
from __future__ import annotations
import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

# relative to the working directory (the monorepo root); resolved in BuildLayout
DEFAULT_DEPENDENCY_ROOT = Path('packages') / 'sdk'
DEFAULT_PACKAGE_ROOT = Path('packages') / 'cli'


@dataclass(frozen=True)
class BuildOptions:
    skip_dependency_build: bool = False
    clean: bool = False
    fail_fast: bool = False
    timeout: Optional[float] = None
    verbose: bool = False


@dataclass(frozen=True)
class ToolCommands:
    """argv prefixes of the external tools (opaque collaborators)."""
    generate: Tuple[str, ...] = ('npm', 'run', 'generate')
    dependency_build: Tuple[str, ...] = ('npm', 'run', 'build')
    cleanup: Tuple[str, ...] = ('npm', 'run', 'clean')
    build: Tuple[str, ...] = ('npm', 'run', 'build')
    copy_files: Tuple[str, ...] = ('npm', 'run', 'copy-files')
    # destination directory is appended
    pack: Tuple[str, ...] = ('npm', 'pack', '--pack-destination')
    # binary path and version flag are appended
    smoke: Tuple[str, ...] = ('node',)
    install_hint: Tuple[str, ...] = ('npm', 'install', '-g')


@dataclass(frozen=True)
class BuildLayout:
    dependency_root: Path = DEFAULT_DEPENDENCY_ROOT
    package_root: Path = DEFAULT_PACKAGE_ROOT
    out_dir_name: str = 'dist'
    dependency_entry_rel: str = 'dist/index.js'
    binary_entry_rel: str = 'bin/cli.js'
    manifest_rel: str = 'package.json'
    archive_glob: str = '*.tgz'
    archive_suffix: str = '.tgz'
    version_flag: str = '--version'
    commands: ToolCommands = field(default_factory=ToolCommands)

    def __post_init__(self):
        # phases chdir around tool calls; relative roots would drift
        object.__setattr__(self, 'dependency_root', Path(self.dependency_root).resolve())
        object.__setattr__(self, 'package_root', Path(self.package_root).resolve())

    @property
    def dependency_out_dir(self) -> Path:
        return Path(self.dependency_root) / self.out_dir_name

    @property
    def dependency_entry(self) -> Path:
        return Path(self.dependency_root) / self.dependency_entry_rel

    @property
    def out_dir(self) -> Path:
        return Path(self.package_root) / self.out_dir_name

    @property
    def binary_entry(self) -> Path:
        return self.out_dir / self.binary_entry_rel

    @property
    def manifest(self) -> Path:
        return self.out_dir / self.manifest_rel

    @property
    def roots(self) -> Tuple[Path, Path]:
        return (Path(self.dependency_root), Path(self.package_root))


def add_layout_args(ap: argparse.ArgumentParser) -> argparse.ArgumentParser:
    ap.add_argument('--package-root', type=Path, default=DEFAULT_PACKAGE_ROOT, help='CLI package root')
    ap.add_argument('--dependency-root', type=Path, default=DEFAULT_DEPENDENCY_ROOT, help='dependency (sdk) package root')
    ap.add_argument('--cmd-timeout', type=float, default=None, help='max seconds per external tool (exceeded -> kill, fatal)')
    ap.add_argument('--fail-fast', action='store_true', help='abort on the first non-zero tool exit')
    ap.add_argument('--verbose', action='store_true', help='show full tool output instead of error lines only')
    return ap


def layout_from_args(args: argparse.Namespace) -> BuildLayout:
    return BuildLayout(dependency_root=args.dependency_root, package_root=args.package_root)


def options_from_args(args: argparse.Namespace) -> BuildOptions:
    return BuildOptions(
        skip_dependency_build=getattr(args, 'skip_dependency_build', False),
        clean=getattr(args, 'clean', False),
        fail_fast=args.fail_fast,
        timeout=args.cmd_timeout,
        verbose=args.verbose,
    )

__all__ = [
    'DEFAULT_DEPENDENCY_ROOT', 'DEFAULT_PACKAGE_ROOT', 'BuildOptions', 'ToolCommands', 'BuildLayout', 'add_layout_args', 'layout_from_args', 'options_from_args'
]
