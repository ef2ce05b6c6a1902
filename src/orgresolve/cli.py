from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer

from .client import OrgResolver
from .config import RegistryConfig
from .core.contracts import OrgMatch, SearchResult, as_dict
from .registry.local import local_org_search
from .stores.factory import make_store

app = typer.Typer(help="orgresolve: organization lookup via a ROR-style registry")


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        stream=sys.stderr,
        format="[%(name)s] %(levelname)s %(message)s",
    )


def _resolver(
    *,
    orgs: Optional[Path],
    org_db: Optional[Path],
    contact: Optional[str],
    max_pages: Optional[int],
) -> OrgResolver:
    try:
        config = RegistryConfig.from_env(app_email=contact, max_pages=max_pages)
    except ValueError as e:
        typer.echo(f"configuration error: {e}", err=True)
        raise typer.Exit(code=2)
    return OrgResolver(config=config, store=make_store(orgs_json=orgs, org_db=org_db))


def _echo_matches(matches: List[OrgMatch], as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps([as_dict(m) for m in matches], ensure_ascii=False))
        return
    for m in matches:
        if isinstance(m, SearchResult):
            typer.echo(f"{m.id}\t{m.name}")
        else:
            abbr = f" [{m.abbreviation}]" if m.abbreviation else ""
            typer.echo(f"{m.id or '-'}\t{m.name}{abbr}")


@app.command("search")
def search(
    name: str = typer.Argument(..., help="Organization name as typed"),
    orgs: Optional[Path] = typer.Option(
        None, help="Local fallback orgs (JSON array or .jsonl)"
    ),
    org_db: Optional[Path] = typer.Option(
        None, help="Local fallback orgs (SQLite file)"
    ),
    contact: Optional[str] = typer.Option(
        None, help="Contact email for the User-Agent"
    ),
    max_pages: Optional[int] = typer.Option(
        None, help="Max registry pages to fetch"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
    debug: bool = typer.Option(False, help="Verbose diagnostics on stderr"),
):
    """Resolve NAME against the registry (local orgs if it is down)."""
    _setup_logging(debug)
    resolver = _resolver(
        orgs=orgs, org_db=org_db, contact=contact, max_pages=max_pages
    )
    _echo_matches(resolver.search(name), as_json)


@app.command("ping")
def ping(
    contact: Optional[str] = typer.Option(
        None, help="Contact email for the User-Agent"
    ),
    debug: bool = typer.Option(False, help="Verbose diagnostics on stderr"),
):
    """Check the registry heartbeat; exit code 1 when it is down."""
    _setup_logging(debug)
    resolver = _resolver(orgs=None, org_db=None, contact=contact, max_pages=None)
    if resolver.ping():
        typer.echo("ok")
        return None
    typer.echo("down")
    raise typer.Exit(code=1)


@app.command("local")
def local(
    name: str = typer.Argument("", help="Substring of a name or abbreviation"),
    orgs: Optional[Path] = typer.Option(
        None, help="Local orgs (JSON array or .jsonl)"
    ),
    org_db: Optional[Path] = typer.Option(None, help="Local orgs (SQLite file)"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
    debug: bool = typer.Option(False, help="Verbose diagnostics on stderr"),
):
    """Search only the local org store."""
    _setup_logging(debug)
    store = make_store(orgs_json=orgs, org_db=org_db)
    _echo_matches(list(local_org_search(store, name)), as_json)


def main() -> None:
    app()


if __name__ == "__main__":
    app()
