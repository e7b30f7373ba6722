"""
PlanGPS CLI - Command-line interface for plan calibrations.

Inspect a calibration file, place GPS coordinates on the plan and manage the
history of saved maps.
"""

import math
import sys
from pathlib import Path
from typing import Optional

import click

from .. import configure_logging
from ..core.calibration import TransformEngine
from ..core.config_spec import Settings, load_calibration_file, load_settings
from ..core.exceptions import PlanGpsError
from ..core.storage import MapRepository, SavedMap
from ..core.viewport import target_zoom_scale


def _load_engine(calibration_path: Path) -> TransformEngine:
    """Create an engine calibrated from a YAML calibration file."""
    calibration_file = load_calibration_file(calibration_path)
    engine = TransformEngine()
    engine.apply_calibration(calibration_file.to_calibration())
    return engine


def _fail(error: Exception) -> None:
    click.echo(f"❌ {error}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version='1.0.0', prog_name='PlanGPS')
@click.option('--settings', 'settings_path', type=click.Path(exists=True, path_type=Path),
              help='YAML settings file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_context
def cli(ctx: click.Context, settings_path: Optional[Path], verbose: bool):
    """PlanGPS - GPS positions on floor plans and site plans.

    \b
    Common Commands:
      plangps project calib.yaml 52.1 4.3    - Place a GPS coordinate on the plan
      plangps info calib.yaml                - Show transform, scale and north
      plangps zoom calib.yaml --width 1080   - Zoom that fits 200 m on screen
      plangps maps list                      - List saved maps

    Negative coordinates need a '--' separator:
      plangps project calib.yaml -- -33.86 151.21
    """
    try:
        settings = load_settings(settings_path, log_level='debug' if verbose else None)
    except PlanGpsError as e:
        _fail(e)
    configure_logging(settings.log_level)
    ctx.obj = settings


@cli.command()
@click.argument('calibration_path', type=click.Path(exists=True, path_type=Path))
@click.argument('latitude', type=float)
@click.argument('longitude', type=float)
def project(calibration_path: Path, latitude: float, longitude: float):
    """Print the plan pixel for LATITUDE, LONGITUDE.

    CALIBRATION_PATH: Path to YAML calibration file
    """
    try:
        engine = _load_engine(calibration_path)
    except PlanGpsError as e:
        _fail(e)

    result = engine.locate(latitude, longitude)
    if not result.ok:
        click.echo(f"⚠️  {result.status.value}: {result.message}", err=True)
        sys.exit(1)

    pixel = result.value
    click.echo(f"{pixel.x:.3f} {pixel.y:.3f}")


@cli.command()
@click.argument('calibration_path', type=click.Path(exists=True, path_type=Path))
def info(calibration_path: Path):
    """Show the fitted transform, scale and north direction.

    CALIBRATION_PATH: Path to YAML calibration file
    """
    try:
        engine = _load_engine(calibration_path)
    except PlanGpsError as e:
        _fail(e)

    result = engine.solve()
    if result.ok:
        transform = result.value
        click.echo(f"Method:       {transform.method.value}")
        if transform.source_pair is not None:
            first, second = (i + 1 for i in transform.source_pair)
            click.echo(f"Fitted from:  points {first} and {second}")
        click.echo(f"Coefficients: a={transform.a:.6g} b={transform.b:.6g} tx={transform.tx:.6g}")
        click.echo(f"              c={transform.c:.6g} d={transform.d:.6g} ty={transform.ty:.6g}")
    else:
        click.echo(f"Method:       unavailable ({result.message})")

    angle = engine.north_angle()
    click.echo(f"North angle:  {angle:.6f} rad ({math.degrees(angle):.2f}°)")

    scale = engine.scale()
    if scale.ok:
        click.echo(f"Scale:        {scale.value:.6f} px/m")
    else:
        click.echo(f"Scale:        unavailable ({scale.message})")


@cli.command()
@click.argument('calibration_path', type=click.Path(exists=True, path_type=Path))
@click.option('--width', type=float, required=True, help='Viewport width in screen pixels')
@click.option('--visible-meters', type=float, default=None,
              help='Real-world width to fit on screen (default from settings)')
@click.pass_obj
def zoom(settings: Settings, calibration_path: Path, width: float, visible_meters: Optional[float]):
    """Print the zoom level that fits a real-world width on screen.

    CALIBRATION_PATH: Path to YAML calibration file
    """
    try:
        engine = _load_engine(calibration_path)
    except PlanGpsError as e:
        _fail(e)

    scale = target_zoom_scale(
        engine.pixels_per_meter(),
        width,
        visible_meters=visible_meters or settings.visible_meters,
        content_scale=settings.content_scale,
    )
    if scale is None:
        click.echo("⚠️  Scale unavailable for this calibration", err=True)
        sys.exit(1)
    click.echo(f"{scale:.4f}")


@cli.group()
@click.option('--repository', type=click.Path(path_type=Path), default=None,
              help='Saved map store (default from settings)')
@click.pass_context
def maps(ctx: click.Context, repository: Optional[Path]):
    """Manage the history of saved maps."""
    settings: Settings = ctx.obj
    ctx.obj = MapRepository(repository or settings.repository_path)


@maps.command('list')
@click.pass_obj
def list_maps(repository: MapRepository):
    """List saved maps, most recently opened first."""
    try:
        saved_maps = repository.list_maps()
    except PlanGpsError as e:
        _fail(e)

    if not saved_maps:
        click.echo("No saved maps")
        return
    for saved in saved_maps:
        opened = saved.last_opened.strftime('%Y-%m-%d %H:%M')
        click.echo(f"{saved.id}  {saved.name}  ({saved.file_path}, opened {opened})")


@maps.command('save')
@click.argument('calibration_path', type=click.Path(exists=True, path_type=Path))
@click.option('--name', default=None, help='Display name (default from calibration file)')
@click.option('--file', 'file_path', default=None, help='Plan file (default from calibration file)')
@click.option('--id', 'map_id', default=None, help='Id of an existing map to overwrite')
@click.pass_obj
def save_map(repository: MapRepository, calibration_path: Path, name: Optional[str],
             file_path: Optional[str], map_id: Optional[str]):
    """Store a calibration file in the saved map history."""
    try:
        calibration_file = load_calibration_file(calibration_path)
        engine = TransformEngine()
        engine.apply_calibration(calibration_file.to_calibration())

        plan_file = file_path or calibration_file.file_path
        if plan_file is None:
            raise click.UsageError("No plan file given and none in the calibration file")

        saved = SavedMap.from_engine(
            engine,
            name=name or calibration_file.name or Path(plan_file).name,
            file_path=plan_file,
            map_id=map_id,
        )
        repository.save_map(saved)
    except PlanGpsError as e:
        _fail(e)

    click.echo(f"✅ Saved '{saved.name}' as {saved.id}")


@maps.command('show')
@click.argument('map_id')
@click.pass_obj
def show_map(repository: MapRepository, map_id: str):
    """Show the calibration points of a saved map."""
    try:
        saved = repository.get_map(map_id)
    except PlanGpsError as e:
        _fail(e)

    click.echo(f"{saved.name} ({saved.file_path})")
    for index, point in enumerate(saved.calibration, start=1):
        click.echo(
            f"  {index}: ({point.gps.lat:.7f}, {point.gps.lng:.7f}) -> "
            f"({point.pixel.x:.2f}, {point.pixel.y:.2f})"
        )


@maps.command('delete')
@click.argument('map_id')
@click.pass_obj
def delete_map(repository: MapRepository, map_id: str):
    """Remove a saved map from the history."""
    try:
        repository.delete_map(map_id)
    except PlanGpsError as e:
        _fail(e)
    click.echo(f"🗑️  Deleted {map_id}")


if __name__ == '__main__':
    cli()
