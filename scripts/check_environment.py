"""
Pre-flight check for an orgresolve deployment: interpreter version, the
ORGRESOLVE_* configuration, and (with --ping) the registry heartbeat.
"""

import argparse
import sys

MINIMUM_PYTHON = (3, 11)


def main():
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument(
        "--ping", action="store_true", help="also call the registry heartbeat"
    )
    args = ap.parse_args()

    current = sys.version_info
    print(f"current Python version is {current.major}.{current.minor}.{current.micro}")
    if (current.major, current.minor) < MINIMUM_PYTHON:
        raise TypeError(
            "This project requires Python "
            f"{MINIMUM_PYTHON[0]}.{MINIMUM_PYTHON[1]}+. "
            f"Found: Python {current.major}.{current.minor}."
        )
    print(">>> Python is in the right ballpark.")

    try:
        from orgresolve.config import RegistryConfig
    except ImportError as e:
        raise ModuleNotFoundError(
            f"orgresolve is not importable ({e}). Try `pip install -e .` first."
        ) from e

    try:
        config = RegistryConfig.from_env()
    except ValueError as e:
        print(f">>> Configuration invalid: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"registry: {config.base_url} (User-Agent: {config.user_agent})")
    print(
        f"paging: {config.max_pages} pages x {config.max_results_per_page} results,"
        f" {config.max_redirects} redirects"
    )

    if args.ping:
        from orgresolve.registry.search import RegistrySearch
        from orgresolve.stores.memory import InMemoryOrgStore

        up = RegistrySearch(config, InMemoryOrgStore()).ping()
        print(f"heartbeat {config.heartbeat_url} -> {'ok' if up else 'DOWN'}")
        if not up:
            sys.exit(1)

    print(">>> Environment passed all tests!")


if __name__ == "__main__":
    main()
