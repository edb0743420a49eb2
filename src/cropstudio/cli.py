"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.table import Table

from .appctx import AppContext, create_context
from .application.use_cases import (
    DeleteCropRequest,
    ResetCropsRequest,
    SaveCropRequest,
    SuggestCropRequest,
)
from .core.export import export_crop
from .domain.models import AspectMode, FaceBox, FaceDetection, NormalizedRect
from .errors import (
    CropNotFoundError,
    CropStudioError,
    ExportError,
    InvalidAspectModeError,
    SettingsError,
)
from .infrastructure.services import HeadAndShouldersDetector
from .logging_setup import configure_logging
from .utils.image_info import natural_size

app = typer.Typer(help="Crop box editor for talent and look imagery")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (CropNotFoundError, InvalidAspectModeError, ExportError, SettingsError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except CropStudioError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _context(ctx: typer.Context) -> AppContext:
    state = ctx.ensure_object(dict)
    context = state.get("context")
    if context is None:
        context = create_context(state.get("settings_path"), state.get("database_path"))
        state["context"] = context
        ctx.call_on_close(context.close)
    return context


def _parse_face(value: str) -> FaceDetection:
    parts = [part.strip() for part in value.split(",")]
    if len(parts) not in (4, 5):
        raise typer.BadParameter(f"expected x,y,w,h[,confidence], got {value!r}")
    try:
        numbers = [float(part) for part in parts]
    except ValueError as exc:
        raise typer.BadParameter(f"non-numeric face box {value!r}") from exc
    confidence = numbers[4] if len(numbers) == 5 else 1.0
    return FaceDetection(FaceBox(*numbers[:4]), confidence)


def _format_rect(rect: NormalizedRect) -> str:
    return f"x={rect.x:g} y={rect.y:g} w={rect.width:g} h={rect.height:g}"


@app.callback()
def main(
    ctx: typer.Context,
    settings: Optional[Path] = typer.Option(None, "--settings", help="Settings JSON file"),
    database: Optional[Path] = typer.Option(None, "--db", help="Crop database file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Inspect, edit and export persisted crops."""

    configure_logging(log_level or "WARNING")
    state = ctx.ensure_object(dict)
    state["settings_path"] = settings
    state["database_path"] = database


@app.command()
@_handle_errors
def show(ctx: typer.Context, image_id: str) -> None:
    """Print the stored crop for IMAGE_ID."""

    context = _context(ctx)
    record = context.repository.get_crop(image_id)
    if record is None:
        raise CropNotFoundError(f"No crop stored for {image_id}")

    table = Table(title=f"Crop for {image_id}")
    table.add_column("field")
    table.add_column("value")
    table.add_row("id", record.id)
    for key, value in record.rect.as_mapping().items():
        table.add_row(key, f"{value:g}")
    table.add_row("aspect_ratio", record.aspect_mode.value)
    table.add_row("is_auto", str(record.is_automatic))
    table.add_row("cropped_stored_url", record.cropped_url or "")
    print(table)


@app.command("set")
@_handle_errors
def set_crop(
    ctx: typer.Context,
    image_id: str,
    x: float,
    y: float,
    width: float,
    height: float,
    aspect: str = typer.Option("1:1", "--aspect", help="1:1, 4:5 or free"),
) -> None:
    """Store a crop (percentages of the image) for IMAGE_ID."""

    context = _context(ctx)
    response = context.save_crop.execute(SaveCropRequest(
        image_id=image_id,
        rect=NormalizedRect(x, y, width, height),
        aspect_mode=AspectMode.parse(aspect),
        is_automatic=False,
    ))
    if not response.success or response.record is None:
        typer.echo(f"Error: {response.error}", err=True)
        raise typer.Exit(1)
    print(f"[green]Saved crop for {image_id}: {_format_rect(response.record.rect)}")


@app.command()
@_handle_errors
def delete(ctx: typer.Context, image_id: str) -> None:
    """Remove the stored crop for IMAGE_ID."""

    context = _context(ctx)
    record = context.repository.get_crop(image_id)
    if record is None:
        raise CropNotFoundError(f"No crop stored for {image_id}")
    response = context.delete_crop.execute(DeleteCropRequest(crop_id=record.id, image_id=image_id))
    if not response.success:
        typer.echo(f"Error: {response.error}", err=True)
        raise typer.Exit(1)
    print(f"[green]Deleted crop for {image_id}")


@app.command()
@_handle_errors
def reset(ctx: typer.Context, image_ids: List[str]) -> None:
    """Remove the stored crops of every IMAGE_ID given."""

    context = _context(ctx)
    response = context.reset_crops.execute(ResetCropsRequest(image_ids=tuple(image_ids)))
    if not response.success:
        typer.echo(f"Error: {response.error}", err=True)
        raise typer.Exit(1)
    print(f"[green]Removed {response.deleted} crops")


@app.command()
@_handle_errors
def suggest(
    ctx: typer.Context,
    image_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    aspect: str = typer.Option("1:1", "--aspect", help="1:1, 4:5 or free"),
    face: List[str] = typer.Option([], "--face", help="Face box x,y,w,h[,confidence] in pixels"),
    image_id: Optional[str] = typer.Option(None, "--image-id", help="Store the suggestion for this image"),
    max_pct: Optional[float] = typer.Option(None, "--max-pct", help="Largest accepted side, 48-55"),
) -> None:
    """Suggest a head-and-shoulders crop from detected face boxes."""

    context = _context(ctx)
    faces = [_parse_face(value) for value in face]
    detector = HeadAndShouldersDetector(face_provider=lambda _ref: faces)
    response = context.suggest_crop(detector).execute(SuggestCropRequest(
        image_ref=str(image_path),
        aspect_mode=AspectMode.parse(aspect),
        natural_size=natural_size(image_path),
        max_pct=max_pct if max_pct is not None else context.max_suggested_pct,
        image_id=image_id,
        persist=image_id is not None,
    ))
    if response.notice:
        typer.echo(f"Notice: {response.notice}", err=True)
    if not response.success:
        typer.echo(f"Error: {response.error}", err=True)
        raise typer.Exit(1)
    if response.rect is None:
        typer.echo("Error: no suggestion available", err=True)
        raise typer.Exit(1)
    print(f"[green]Suggested crop: {_format_rect(response.rect.rounded())}")
    if image_id is not None:
        print(f"[green]Stored suggestion for {image_id}")


@app.command()
@_handle_errors
def export(
    ctx: typer.Context,
    image_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    image_id: str = typer.Argument(...),
    output: Path = typer.Argument(...),
    size: int = typer.Option(1000, "--size", help="Output width in pixels"),
) -> None:
    """Render the stored crop of IMAGE_ID from IMAGE_PATH into OUTPUT."""

    context = _context(ctx)
    record = context.repository.get_crop(image_id)
    if record is None:
        raise CropNotFoundError(f"No crop stored for {image_id}")
    written = export_crop(image_path, record.rect, output, output_size=size)
    context.repository.set_cropped_url(record.id, str(written))
    print(f"[green]Exported {written}")


@app.command()
@_handle_errors
def edit(
    ctx: typer.Context,
    image_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    image_id: str = typer.Argument(...),
    face: List[str] = typer.Option([], "--face", help="Face box x,y,w,h[,confidence] enabling Auto"),
) -> None:
    """Open the interactive crop editor for IMAGE_PATH."""

    from .gui.main import run_editor

    context = _context(ctx)
    detector = None
    if face:
        faces = [_parse_face(value) for value in face]
        detector = HeadAndShouldersDetector(face_provider=lambda _ref: faces)
    raise typer.Exit(run_editor(context, image_path, image_id, detector))


if __name__ == "__main__":  # pragma: no cover
    app()
