"""
Command-line interface for docforge.

Uses Typer to provide commands for running the autonomous pipeline,
detecting topics in a document, organizing files, browsing stored
artifacts and serving the HTTP API. Supports loading .env files for API
key configuration.
"""

from __future__ import annotations

import json
import mimetypes
from pathlib import Path
import uuid

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
import typer

from .analyzers.detector import TopicDetector
from .analyzers.organizer import DocumentOrganizer
from .config import AppConfig, load_config
from .core.types import FileDescriptor, JobStatus, PayloadError, ProcessRequest
from .jobs import list_generated_content
from .llm.tracing import flush
from .runner import Services, build_services, run_pipeline
from .storage.base import JOBS_TABLE, StorageError

app = typer.Typer(add_completion=False)
console = Console()


def _load(
    config: Path | None,
    log_level: str | None = None,
    api_key: str | None = None,
    storage_root: Path | None = None,
) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    if api_key:
        cfg.provider.api_key = api_key
    if storage_root is not None:
        cfg.storage.local_root = str(storage_root)
    return cfg


@app.command()
def run(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True),
    job_id: str | None = typer.Option(None, "--job-id", help="Job id (read from input when omitted)."),
    file_name: str | None = typer.Option(None, "--file-name", help="Name of the uploaded document."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_dir: Path = typer.Option(Path("logs"), "--log-dir", help="Directory for JSONL logs."),
    storage_root: Path | None = typer.Option(None, "--storage-root", help="Root for local storage."),
    create_job: bool = typer.Option(
        True, "--create-job/--no-create-job", help="Create the job record when it does not exist."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    api_key: str | None = typer.Option(None, "--api-key", help="Override provider API key."),
):
    """Consolidate topics, generate content and store artifacts for a job.

    The input file is either a trigger payload ``{"jobId", "fileName",
    "topics"}`` or a bare list of topics.
    """
    cfg = _load(config, log_level, api_key, storage_root)

    with open(input, encoding="utf-8") as f:
        data = json.load(f)
    payload = {"topics": data} if isinstance(data, list) else dict(data)
    if job_id:
        payload["jobId"] = job_id
    payload.setdefault("jobId", str(uuid.uuid4()))
    if file_name:
        payload["fileName"] = file_name
    payload.setdefault("fileName", input.name)

    try:
        request = ProcessRequest.from_payload(payload)
    except PayloadError as exc:
        console.print(f"[red]Invalid input:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    services = build_services(cfg, log_dir)
    if create_job:
        _ensure_job(services, request)

    response = run_pipeline(request, cfg, services)
    _print_results(response.job_id, response.results)
    for item in response.skipped:
        console.print(f"[yellow]Skipped[/yellow] {item.stage} {item.name}: {item.reason}")
    console.print(
        f"Processed {response.processed_topics} topic groups into {response.total_files} files "
        f"for job {response.job_id}"
    )

    flush()


@app.command()
def detect(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write topics JSON here."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    api_key: str | None = typer.Option(None, "--api-key", help="Override provider API key."),
):
    """Detect topics in a plain-text document."""
    cfg = _load(config, log_level, api_key)
    services = build_services(cfg, None)
    text = input.read_text(encoding="utf-8", errors="replace")

    topics = TopicDetector(services.provider, services.logger, services.llm_logger).detect(text)
    rendered = json.dumps({"topics": [t.to_dict() for t in topics]}, indent=2, ensure_ascii=False)
    if output is not None:
        output.write_text(rendered + "\n", encoding="utf-8")
        console.print(f"Wrote {len(topics)} topics to {output}")
    else:
        console.print_json(rendered)

    flush()


@app.command()
def organize(
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    record: bool = typer.Option(
        False, "--record/--no-record", help="Upload non-duplicate files and write their documents rows."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    storage_root: Path | None = typer.Option(None, "--storage-root", help="Root for local storage."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    api_key: str | None = typer.Option(None, "--api-key", help="Override provider API key."),
):
    """Suggest a category, tags and folder for files and flag duplicates."""
    cfg = _load(config, log_level, api_key, storage_root)
    services = build_services(cfg, None)
    organizer = DocumentOrganizer(services.provider, services.store, services.logger, services.llm_logger)

    descriptors = [
        FileDescriptor(name=path.name, size=path.stat().st_size, type=mimetypes.guess_type(path.name)[0] or "")
        for path in files
    ]
    organized = organizer.organize(descriptors)

    table = Table(title="Organized files")
    table.add_column("File")
    table.add_column("Category")
    table.add_column("Tags")
    table.add_column("Folder")
    table.add_column("Duplicate of")
    for item in organized:
        duplicate = item.duplicate.name if item.duplicate else ""
        table.add_row(item.original_name, item.category, ", ".join(item.tags), item.folder_path, duplicate)
    console.print(table)

    if record:
        for path, descriptor, item in zip(files, descriptors, organized):
            if item.is_duplicate:
                console.print(f"[yellow]Skipped[/yellow] {descriptor.name}: duplicate")
                continue
            try:
                row = organizer.record(item, descriptor, path.read_bytes(), services.storage)
            except StorageError as exc:
                console.print(f"[red]Not recorded[/red] {descriptor.name}: {exc}")
                continue
            console.print(f"Recorded {descriptor.name} as {row['file_name']}")

    flush()


@app.command()
def browse(
    job_id: str = typer.Option(..., "--job-id"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    storage_root: Path | None = typer.Option(None, "--storage-root", help="Root for local storage."),
):
    """List the stored artifacts of a job."""
    cfg = _load(config, storage_root=storage_root)
    from .storage.factory import create_storage

    storage, store = create_storage(cfg.storage)
    results = list_generated_content(job_id, store, storage)
    if not results:
        console.print(f"No generated content for job {job_id}")
        return
    _print_results(job_id, results)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_dir: Path = typer.Option(Path("logs"), "--log-dir", help="Directory for JSONL logs."),
):
    """Serve the HTTP API."""
    import uvicorn

    from .server import create_app

    cfg = _load(config)
    services = build_services(cfg, log_dir)
    uvicorn.run(create_app(cfg, services), host=host, port=port)


def _ensure_job(services: Services, request: ProcessRequest) -> None:
    if services.store.get(JOBS_TABLE, request.job_id) is not None:
        return
    services.store.insert(
        JOBS_TABLE,
        {
            "id": request.job_id,
            "file_name": request.file_name,
            "file_size": 0,
            "status": JobStatus.PROCESSING.value,
            "total_content": 0,
            "autonomous_mode": False,
        },
    )


def _print_results(job_id: str, results) -> None:
    table = Table(title=f"Generated content for {job_id}")
    table.add_column("Category")
    table.add_column("File")
    table.add_column("Size", justify="right")
    table.add_column("Download URL", overflow="fold")
    for result in results:
        for item in result.files:
            table.add_row(result.title, item.name, item.size, item.download_url)
        table.add_section()
    console.print(table)


if __name__ == "__main__":
    app()
