"""util_code01_build_io

Core process / filesystem helpers shared by every ``proc_code`` phase.
All phase modules should import from this canonical name.

Contents:
  - ``BuildAbort``: the single fatal-condition exception (-> exit 1 in runall)
  - ``pushd``: scoped working-directory change, restored on every exit path
  - ``run_tool`` / ``report_tool``: blocking tool invocation + operator view
  - ``error_lines``: case-insensitive "error" scan used for highlighting only
  - ``newest_match`` / ``remove_path``: artifact lookup and idempotent removal
"""
from __future__ import annotations
import os, re, shutil, subprocess, time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple

from util_code02_colors import paint

ERROR_PATTERN = re.compile(r'error', re.IGNORECASE)
WARNING_PATTERN = re.compile(r'warn', re.IGNORECASE)

# conventional shell status for "command not found"
SPAWN_FAILED_RC = 127

INDENT = '    '


class BuildAbort(Exception):
    """Fatal pipeline condition. The message is shown to the operator as-is."""


@dataclass(frozen=True)
class ToolRun:
    label: str
    cmd: Tuple[str, ...]
    returncode: int
    output: str
    duration: float

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def detail(msg: str, tone: str | None = None) -> None:
    """Print one indented detail line under the current ``[k/5]`` marker."""
    text = f"{INDENT}{msg}"
    print(paint(text, tone) if tone else text)


@contextmanager
def pushd(path: Path | str) -> Iterator[Path]:
    """Change into ``path`` for the duration of the block.

    The previous working directory is restored whether the block returns,
    raises ``BuildAbort`` or anything else.
    """
    prev = Path.cwd()
    target = Path(path)
    if not target.is_dir():
        raise BuildAbort(f"directory not found: {target}")
    os.chdir(target)
    try:
        yield target
    finally:
        os.chdir(prev)


def _resolve(cmd: Sequence[str]) -> list[str]:
    # npm / npx are .cmd shims on Windows; subprocess needs the full name there
    argv = [str(c) for c in cmd]
    found = shutil.which(argv[0])
    if found:
        argv[0] = found
    return argv


def run_tool(label: str, cmd: Sequence[str], timeout: float | None = None) -> ToolRun:
    """Run ``cmd`` in the current directory and wait for it.

    stdout and stderr are merged into one text blob (UTF-8, undecodable
    bytes replaced). A tool that cannot be started is reported like a
    failed one (rc=127, OS error as output); a tool that outlives
    ``timeout`` is killed and aborts the build.
    """
    t0 = time.time()
    try:
        cp = subprocess.run(_resolve(cmd), stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
                            encoding='utf-8', errors='replace', timeout=timeout)
    except subprocess.TimeoutExpired:
        raise BuildAbort(f"{label}: exceeded {timeout}s -> terminated") from None
    except OSError as e:
        return ToolRun(label, tuple(str(c) for c in cmd), SPAWN_FAILED_RC, f"spawn error: {e}", time.time() - t0)
    return ToolRun(label, tuple(str(c) for c in cmd), cp.returncode, cp.stdout or '', time.time() - t0)


def error_lines(text: str, exclude: Optional[re.Pattern] = None) -> list[str]:
    """Lines mentioning "error" (any case), minus those matching ``exclude``."""
    hits = []
    for line in text.splitlines():
        if not ERROR_PATTERN.search(line):
            continue
        if exclude is not None and exclude.search(line):
            continue
        hits.append(line.rstrip())
    return hits


def report_tool(run: ToolRun, options, mode: str = 'errors', exclude: Optional[re.Pattern] = None) -> ToolRun:
    """Show the operator what matters from ``run``.

    mode='errors' surfaces error lines only (everything with --verbose);
    mode='quiet' discards the output (unless --verbose). A non-zero exit is always reported,
    and is fatal only under --fail-fast: otherwise the artifact check that
    follows the step decides.
    """
    if mode == 'errors':
        if options.verbose:
            for line in run.output.splitlines():
                detail(f"  {line}", 'dim')
        else:
            for line in error_lines(run.output, exclude):
                detail(f"  {line.strip()}", 'err')
    elif options.verbose and run.output.strip():
        for line in run.output.splitlines():
            detail(f"  {line}", 'dim')
    if run.ok:
        detail(f"{run.label}: ok ({run.duration:.1f}s)")
        return run
    detail(f"[WARN] {run.label}: rc={run.returncode} ({run.duration:.1f}s)", 'warn')
    if mode != 'errors' and run.output.startswith('spawn error'):
        detail(f"  {run.output}", 'err')
    if options.fail_fast:
        raise BuildAbort(f"{run.label} failed with exit code {run.returncode} (--fail-fast)")
    return run


def require_file(path: Path, what: str) -> Path:
    """Raise ``BuildAbort`` unless ``path`` is an existing file."""
    if not Path(path).is_file():
        raise BuildAbort(f"{what} not found: {path}")
    return Path(path)


def newest_match(directory: Path | str, pattern: str) -> Optional[Path]:
    """Return the most recently modified file matching ``pattern`` (or None)."""
    files = [p for p in Path(directory).glob(pattern) if p.is_file()]
    if not files:
        return None
    # name breaks ties on coarse-mtime filesystems
    return max(files, key=lambda p: (p.stat().st_mtime, p.name))


def remove_path(path: Path) -> bool:
    """Delete a file or directory tree. Returns False when nothing was there."""
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False

__all__ = [
    'BuildAbort', 'ToolRun', 'ERROR_PATTERN', 'WARNING_PATTERN', 'detail', 'pushd', 'run_tool',
    'error_lines', 'report_tool', 'require_file', 'newest_match', 'remove_path'
]
