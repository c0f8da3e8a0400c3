"""CLI entrypoint for the document library."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

import requests
import typer
import uvicorn

app = typer.Typer(name="doclib", help="Document library command-line interface")
logs_app = typer.Typer(name="logs", help="Query and export audit logs")
app.add_typer(logs_app, name="logs")

DEFAULT_HOST = "http://127.0.0.1:8765"
APP_PATH = "doc_library.app:app"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip("/")
    env_host = os.environ.get("DOCLIB_HOST")
    if env_host:
        return env_host.rstrip("/")
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    base = _resolve_host(host)
    url = f"{base}{path}"
    try:
        resp = requests.request(method, url, timeout=60, **kwargs)
    except requests.RequestException as exc:
        typer.echo(f"Cannot reach {base}: {exc}", err=True)
        raise typer.Exit(code=1)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        if isinstance(detail, dict):
            detail = detail.get("detail", detail)
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


def _echo_json(resp: requests.Response) -> None:
    typer.echo(json.dumps(resp.json(), indent=2, ensure_ascii=False))


def _log_params(
    page: int,
    page_size: Optional[int],
    search: Optional[str],
    action: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
) -> dict[str, object]:
    params: dict[str, object] = {"page": page}
    optional = {
        "pageSize": page_size,
        "search": search,
        "action": action,
        "startDate": start_date,
        "endDate": end_date,
    }
    params.update({key: value for key, value in optional.items() if value is not None})
    return params


@app.command()
def search(
    term: str = typer.Argument(..., help="Search term"),
    host: Optional[str] = typer.Option(None, "--host", help="Override API host"),
) -> None:
    """Rank local documents and folders against a term."""
    resp = _request("GET", "/search", host=host, params={"q": term})
    results = resp.json()
    if not results:
        typer.echo("No matches.")
        return
    for item in results:
        typer.echo(f"{item['relevance']:>4}  {item['type']:<8}  {item['title']}  ({item['id']})")


@app.command()
def dashboard(
    host: Optional[str] = typer.Option(None, "--host", help="Override API host"),
) -> None:
    """Show dashboard statistics."""
    _echo_json(_request("GET", "/dashboard", host=host))


@app.command()
def files(
    search_term: str = typer.Option("", "--search", help="Filter by file name or uploader"),
    sort_by: str = typer.Option("viewCount", "--sort-by", help="viewCount, uploadTime or size"),
    order: str = typer.Option("desc", "--order", help="asc or desc"),
    host: Optional[str] = typer.Option(None, "--host", help="Override API host"),
) -> None:
    """Per-file view statistics from the backend."""
    resp = _request(
        "GET",
        "/stats/files",
        host=host,
        params={"search": search_term, "sortBy": sort_by, "order": order},
    )
    report = resp.json()
    for item in report["files"]:
        typer.echo(f"{item['viewCount']:>6}  {item['popularity']:<7}  {item['originalName']}  [{item['uploader']}]")
    typer.echo(f"{report['totalFiles']} files, {report['totalViews']} views")


@app.command()
def overview(
    host: Optional[str] = typer.Option(None, "--host", help="Override API host"),
) -> None:
    """Local record counts, backend file count and test-data detection."""
    _echo_json(_request("GET", "/data/overview", host=host))


@app.command()
def sync(
    host: Optional[str] = typer.Option(None, "--host", help="Override API host"),
) -> None:
    """Replace local documents with the backend file listing."""
    resp = _request("POST", "/data/sync", host=host)
    typer.echo(resp.json()["message"])


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    host: Optional[str] = typer.Option(None, "--host", help="Override API host"),
) -> None:
    """Erase all local documents, folders, activities and recent searches."""
    if not yes:
        typer.confirm("This permanently deletes all local data. Continue?", abort=True)
    resp = _request("POST", "/data/clear", host=host, params={"confirm": "true"})
    typer.echo(resp.json()["message"])


@app.command()
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    host: Optional[str] = typer.Option(None, "--host", help="Override API host"),
) -> None:
    """Clear local data, then sync documents from the backend."""
    if not yes:
        typer.confirm("This clears all local data before syncing. Continue?", abort=True)
    resp = _request("POST", "/data/reset", host=host, params={"confirm": "true"})
    typer.echo(resp.json()["message"])


@app.command()
def serve(
    bind_host: str = typer.Option("127.0.0.1", "--bind", help="Interface to listen on"),
    port: int = typer.Option(8765, "--port", min=1, max=65535),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HTTP API that the other commands talk to."""
    uvicorn.run(APP_PATH, host=bind_host, port=port, reload=reload, log_config=None)


@logs_app.command("list")
def list_logs(
    page: int = typer.Option(1, "--page", min=1),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, max=100),
    search_term: Optional[str] = typer.Option(None, "--search"),
    action: Optional[str] = typer.Option(None, "--action", help="e.g. LOGIN, VIEW_FILE"),
    start_date: Optional[str] = typer.Option(None, "--start-date", help="ISO-8601, inclusive"),
    end_date: Optional[str] = typer.Option(None, "--end-date", help="ISO-8601, inclusive"),
    host: Optional[str] = typer.Option(None, "--host", help="Override API host"),
) -> None:
    """Show one page of audit logs."""
    params = _log_params(page, page_size, search_term, action, start_date, end_date)
    _echo_json(_request("GET", "/logs", host=host, params=params))


@logs_app.command("export")
def export_logs(
    output: Path = typer.Option(Path("user-logs.csv"), "--output", "-o", help="Destination CSV file"),
    page: int = typer.Option(1, "--page", min=1),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, max=100),
    search_term: Optional[str] = typer.Option(None, "--search"),
    action: Optional[str] = typer.Option(None, "--action"),
    start_date: Optional[str] = typer.Option(None, "--start-date"),
    end_date: Optional[str] = typer.Option(None, "--end-date"),
    host: Optional[str] = typer.Option(None, "--host", help="Override API host"),
) -> None:
    """Export one page of audit logs as CSV."""
    params = _log_params(page, page_size, search_term, action, start_date, end_date)
    resp = _request("GET", "/logs/export", host=host, params=params)
    output = output.expanduser()
    output.write_text(resp.text, encoding="utf-8")
    typer.echo(f"Wrote {output}")


@logs_app.command("cleanup")
def cleanup_logs(
    host: Optional[str] = typer.Option(None, "--host", help="Override API host"),
) -> None:
    """Ask the backend to delete logs older than its retention window."""
    resp = _request("DELETE", "/logs/cleanup", host=host)
    typer.echo(resp.json()["message"])


if __name__ == "__main__":
    app()
