import argparse
import re
import sys
import tomllib
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
PYPROJECT = REPO_ROOT / "pyproject.toml"
INIT_FILE = REPO_ROOT / "src" / "orgresolve" / "__init__.py"

VERSION_RE = re.compile(r"^__version__\s*=\s*['\"]([^'\"]*)['\"]", re.M)


def read_version(pyproject_path: Path) -> str:
    data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    proj = data.get("project") or {}
    if "version" not in proj:
        raise KeyError("version not found in [project]")
    return str(proj["version"]).strip()


def sync_init(version: str, init_text: str) -> str:
    line = f'__version__ = "{version}"'
    if VERSION_RE.search(init_text):
        return VERSION_RE.sub(line, init_text, count=1)
    return init_text.rstrip() + "\n\n" + line + "\n"


def main() -> None:
    ap = argparse.ArgumentParser(
        description="Copy [project].version into orgresolve.__version__"
    )
    ap.add_argument(
        "--check",
        action="store_true",
        help="only report a mismatch (exit 1), do not write",
    )
    args = ap.parse_args()

    for p in (PYPROJECT, INIT_FILE):
        if not p.exists():
            print(f"{p.name} not found at {p}", file=sys.stderr)
            sys.exit(1)

    version = read_version(PYPROJECT)
    current = INIT_FILE.read_text(encoding="utf-8")
    m = VERSION_RE.search(current)
    if m and m.group(1) == version:
        print(f"__version__ already {version}")
        return
    if args.check:
        found = m.group(1) if m else "(missing)"
        print(f"__version__ is {found}, pyproject says {version}", file=sys.stderr)
        sys.exit(1)

    INIT_FILE.write_text(sync_init(version, current), encoding="utf-8")
    print(f"Updated __version__ in {INIT_FILE} to {version}")


if __name__ == "__main__":
    main()
