"""
Bump version in avrpwm/__init__.py and pyproject.toml using YY.MM.release_number scheme.
- If current YY.MM matches, increment release_number.
- If not, set release_number to 1.
"""
import re
from datetime import datetime, timezone

VERSION_FILES = {
    "avrpwm/__init__.py": re.compile(r'^__version__\s*=\s*"(\d{2})\.(\d{2})\.(\d+)"'),
    "pyproject.toml": re.compile(r'^version\s*=\s*"(\d{2})\.(\d{2})\.(\d+)"'),
}


def next_version(current, now):
    yy, mm, rel = current
    prefix = f"{now.year % 100:02}.{now.month:02}"
    if f"{yy}.{mm}" == prefix:
        return f"{prefix}.{int(rel) + 1}"
    return f"{prefix}.1"


def bump_file(path, pattern, now):
    with open(path, "r", encoding="utf-8") as f:
        lines = f.readlines()
    new_version = None
    for i, line in enumerate(lines):
        m = pattern.search(line)
        if m:
            new_version = next_version(m.groups(), now)
            lines[i] = line[:m.start(1)] + new_version + line[m.end(3):]
            break
    if new_version is None:
        return None
    with open(path, "w", encoding="utf-8") as f:
        f.writelines(lines)
    return new_version


def bump_version():
    now = datetime.now(timezone.utc)
    for path, pattern in VERSION_FILES.items():
        new_version = bump_file(path, pattern, now)
        if new_version:
            print(f"Bumped {path} to {new_version}")
        else:
            print(f"No version string found in {path}.")


if __name__ == "__main__":
    bump_version()
