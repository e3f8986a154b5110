"""Shared fixtures: a throw-away sdk/cli repo with fake npm tools.

Each external tool is a tiny Python script run via ``sys.executable``; they
behave like the real npm scripts only as far as the pipeline can observe
(files created, lines printed, exit code).
"""
import json
import sys
import textwrap
from pathlib import Path

import pytest

from util_code03_layout import BuildLayout, ToolCommands

PY = sys.executable

FAKE_TOOLS = {
    'generate.py': """
        print('generating client from openapi.yaml')
        print('done in 0.2s')
    """,
    'sdk_build.py': """
        from pathlib import Path
        Path('dist').mkdir(exist_ok=True)
        Path('dist/index.js').write_text('module.exports = {};')
        print('bundling sdk')
        print('src/client.ts: Error TS2322 (ignored by fake)')
    """,
    'cleanup.py': """
        print('rimraf dist')
    """,
    'cli_build.py': """
        from pathlib import Path
        Path('dist/bin').mkdir(parents=True, exist_ok=True)
        Path('dist/bin/cli.js').write_text("print('demo-cli 1.2.3')")
        print('compiled 12 files')
        print('WARNING: source map has no error mappings')
        print('ERROR in ./src/legacy.ts')
    """,
    'copy_files.py': """
        import shutil
        shutil.copy('package.json', 'dist/package.json')
        print('copied package.json')
    """,
    'pack.py': """
        import json, sys
        from pathlib import Path
        dest = Path(sys.argv[-1])
        meta = json.loads(Path('package.json').read_text())
        name = f"{meta['name']}-{meta['version']}.tgz"
        (dest / name).write_bytes(b'fake tarball')
        print('npm notice package: ' + meta['name'])
        print('npm notice total files: 3')
        print(name)
    """,
}

MANIFEST = {
    'name': 'demo-cli',
    'version': '1.2.3',
    'bin': {'demo': 'bin/cli.js'},
    'scripts': {'build': 'tsup', 'clean': 'rimraf dist'},
    'dependencies': {'demo-sdk': '1.0.0'},
    'devDependencies': {'typescript': '5.4.0'},
    'publishConfig': {'access': 'public', 'nested': {'registry': {'url': 'https://registry.npmjs.org/'}}},
}


def write_tool(directory: Path, name: str, body: str) -> Path:
    path = directory / name
    path.write_text(textwrap.dedent(body).lstrip(), encoding='utf-8')
    return path


@pytest.fixture
def fake_repo(tmp_path: Path):
    tools = tmp_path / 'tools'
    tools.mkdir()
    for name, body in FAKE_TOOLS.items():
        write_tool(tools, name, body)
    sdk = tmp_path / 'packages' / 'sdk'
    cli = tmp_path / 'packages' / 'cli'
    sdk.mkdir(parents=True)
    cli.mkdir(parents=True)
    (cli / 'package.json').write_text(json.dumps(MANIFEST, indent=2), encoding='utf-8')
    return tmp_path


def fake_commands(repo: Path, **overrides) -> ToolCommands:
    tools = repo / 'tools'
    cmds = dict(
        generate=(PY, str(tools / 'generate.py')),
        dependency_build=(PY, str(tools / 'sdk_build.py')),
        cleanup=(PY, str(tools / 'cleanup.py')),
        build=(PY, str(tools / 'cli_build.py')),
        copy_files=(PY, str(tools / 'copy_files.py')),
        pack=(PY, str(tools / 'pack.py')),
        smoke=(PY,),
        install_hint=('npm', 'install', '-g'),
    )
    cmds.update(overrides)
    return ToolCommands(**cmds)


def make_layout(repo: Path, **overrides) -> BuildLayout:
    return BuildLayout(
        dependency_root=repo / 'packages' / 'sdk',
        package_root=repo / 'packages' / 'cli',
        commands=fake_commands(repo, **overrides),
    )


@pytest.fixture
def layout(fake_repo: Path) -> BuildLayout:
    return make_layout(fake_repo)


@pytest.fixture
def commands(fake_repo: Path) -> ToolCommands:
    return fake_commands(fake_repo)


@pytest.fixture
def layout_with(fake_repo: Path):
    """Factory: layout with some tool commands replaced."""
    def _make(**overrides) -> BuildLayout:
        return make_layout(fake_repo, **overrides)
    return _make
