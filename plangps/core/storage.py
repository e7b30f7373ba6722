"""Saved plans and their calibrations.

Each saved map stores the six raw calibration points as plain numbers. The
transform is never stored; restoring a map hands the points back to the
engine, which refits the transform on demand.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from loguru import logger

from .exceptions import MapNotFoundError, MapRepositoryError, NotCalibratedError
from .types import Calibration, CalibrationPoint, LatLng, PixelPoint

if TYPE_CHECKING:
    from .calibration.engine import TransformEngine


@dataclass
class SavedMap:
    """A plan file together with its calibration."""
    id: str
    name: str
    file_path: str
    calibration: Calibration
    last_opened: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_engine(
        cls,
        engine: "TransformEngine",
        name: str,
        file_path: Union[str, Path],
        map_id: Optional[str] = None
    ) -> "SavedMap":
        """Capture the engine's current calibration.

        Raises:
            NotCalibratedError: If the engine has no calibration
        """
        calibration = engine.calibration
        if calibration is None:
            raise NotCalibratedError("save map")
        now = datetime.now()
        return cls(
            id=map_id or now.isoformat(),
            name=name,
            file_path=str(file_path),
            calibration=calibration,
            last_opened=now,
        )

    def apply_to(self, engine: "TransformEngine") -> None:
        """Restore this map's calibration into the engine."""
        engine.apply_calibration(self.calibration)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'id': self.id,
            'name': self.name,
            'filePath': self.file_path,
        }
        for index, point in enumerate(self.calibration, start=1):
            data[f'gps{index}_x'] = point.gps.lat
            data[f'gps{index}_y'] = point.gps.lng
            data[f'pdf{index}_x'] = point.pixel.x
            data[f'pdf{index}_y'] = point.pixel.y
        data['lastOpened'] = self.last_opened.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedMap":
        """Rebuild a saved map from its stored form.

        Records written before the third point existed load with point 3 at
        the origin.
        """
        def point(index: int) -> CalibrationPoint:
            default = 0.0 if index == 3 else None
            values = [
                data.get(f'{prefix}{index}_{axis}', default)
                for prefix in ('gps', 'pdf') for axis in ('x', 'y')
            ]
            if any(v is None for v in values):
                raise KeyError(f"calibration point {index}")
            lat, lng, x, y = (float(v) for v in values)
            return CalibrationPoint(LatLng(lat, lng), PixelPoint(x, y))

        return cls(
            id=data['id'],
            name=data['name'],
            file_path=data['filePath'],
            calibration=Calibration(point(1), point(2), point(3)),
            last_opened=datetime.fromisoformat(data['lastOpened']),
        )


class MapRepository:
    """JSON file holding the history of saved maps."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def list_maps(self) -> List[SavedMap]:
        """All saved maps, most recently opened first."""
        if not self.path.exists():
            logger.debug(f"No saved maps at {self.path}")
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            maps = [SavedMap.from_dict(entry) for entry in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise MapRepositoryError(
                f"Failed to read saved maps: {e}", {"path": str(self.path)}
            ) from e

        logger.debug(f"Loaded {len(maps)} saved maps from {self.path}")
        maps.sort(key=lambda m: m.last_opened, reverse=True)
        return maps

    def get_map(self, map_id: str) -> SavedMap:
        maps = self.list_maps()
        for saved in maps:
            if saved.id == map_id:
                return saved
        raise MapNotFoundError(map_id, [m.id for m in maps])

    def save_map(self, saved: SavedMap) -> None:
        """Store a map, replacing any entry with the same id or file path."""
        maps = [
            m for m in self.list_maps()
            if m.id != saved.id and m.file_path != saved.file_path
        ]
        maps.append(saved)
        self._write(maps)
        logger.info(f"Saved map '{saved.name}' ({len(maps)} maps in history)")

    def delete_map(self, map_id: str) -> None:
        """Remove a map. Unknown ids raise MapNotFoundError."""
        maps = self.list_maps()
        remaining = [m for m in maps if m.id != map_id]
        if len(remaining) == len(maps):
            raise MapNotFoundError(map_id, [m.id for m in maps])
        self._write(remaining)
        logger.info(f"Deleted saved map {map_id}")

    def _write(self, maps: List[SavedMap]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps([m.to_dict() for m in maps], indent=2), encoding="utf-8"
            )
        except OSError as e:
            raise MapRepositoryError(
                f"Failed to write saved maps: {e}", {"path": str(self.path)}
            ) from e
