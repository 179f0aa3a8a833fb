#!/usr/bin/env python3
import os
import re
import sys

PYPROJECT = 'pyproject.toml'
PACKAGE_INIT = 's3sig/__init__.py'

_PYPROJECT_VERSION = re.compile(r'^version = "([^"]+)"', re.MULTILINE)
_INIT_VERSION = re.compile(r'__version__ = "[^"]+"')


def bump_version(current: str, bump_type: str) -> str:
    major, minor, patch = map(int, current.split('.'))
    if bump_type == 'major':
        return f"{major + 1}.0.0"
    elif bump_type == 'minor':
        return f"{major}.{minor + 1}.0"
    elif bump_type == 'patch':
        return f"{major}.{minor}.{patch + 1}"
    else:
        raise ValueError(f"Invalid bump type: {bump_type}")


def read_version(pyproject: str) -> str:
    match = _PYPROJECT_VERSION.search(pyproject)
    if not match:
        raise ValueError(f"Could not find version in {PYPROJECT}")
    return match.group(1)


def rewrite_version(path: str, pattern: 're.Pattern', replacement: str) -> None:
    with open(path, 'r') as f:
        content = f.read()
    with open(path, 'w') as f:
        f.write(pattern.sub(replacement, content, count=1))


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: bump_version.py <major|minor|patch>", file=sys.stderr)
        return 1

    with open(PYPROJECT, 'r') as f:
        try:
            current_version = read_version(f.read())
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    new_version = bump_version(current_version, argv[0])
    rewrite_version(PYPROJECT, _PYPROJECT_VERSION, f'version = "{new_version}"')
    rewrite_version(PACKAGE_INIT, _INIT_VERSION, f'__version__ = "{new_version}"')

    # Output for GitHub Actions
    github_output = os.environ.get('GITHUB_OUTPUT')
    if github_output:
        with open(github_output, 'a') as f:
            f.write(f"current_version={current_version}\n")
            f.write(f"new_version={new_version}\n")
    else:
        print(f"Bumped version: {current_version} -> {new_version}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
