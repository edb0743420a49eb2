import logging
import sqlite3
import uuid
from datetime import datetime
from typing import Iterable, List, Optional

from ...config import CROPS_TABLE
from ...domain.models import AspectMode, CropRecord, NormalizedRect
from ...domain.repositories import ICropRepository
from ...errors import CropNotFoundError, InvalidAspectModeError
from ..db.pool import ConnectionPool

_logger = logging.getLogger(__name__)


class SQLiteCropRepository(ICropRepository):
    """Crop rows stored as whole percentage points, one row per image."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool
        _logger.info("SQLiteCropRepository created, db_path=%s", pool.db_path)
        self._init_table()
        self._migrate_schema()

    def _init_table(self):
        with self._pool.connection() as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {CROPS_TABLE} (
                    id TEXT PRIMARY KEY,
                    scrape_image_id TEXT NOT NULL UNIQUE,
                    crop_x INTEGER NOT NULL,
                    crop_y INTEGER NOT NULL,
                    crop_width INTEGER NOT NULL,
                    crop_height INTEGER NOT NULL,
                    aspect_ratio TEXT NOT NULL DEFAULT '1:1',
                    cropped_stored_url TEXT,
                    is_auto INTEGER DEFAULT 1,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

    def _migrate_schema(self):
        """Ensure schema has all required columns for existing databases."""
        with self._pool.connection() as conn:
            cursor = conn.execute(f"PRAGMA table_info({CROPS_TABLE})")
            columns = {row["name"] for row in cursor.fetchall()}

            missing_cols = {
                "cropped_stored_url": "TEXT",
                "is_auto": "INTEGER DEFAULT 1",
            }
            for col, dtype in missing_cols.items():
                if col not in columns:
                    conn.execute(f"ALTER TABLE {CROPS_TABLE} ADD COLUMN {col} {dtype}")
            conn.execute(
                f"CREATE UNIQUE INDEX IF NOT EXISTS idx_{CROPS_TABLE}_image "
                f"ON {CROPS_TABLE}(scrape_image_id)"
            )

    def get_crop(self, image_id: str) -> Optional[CropRecord]:
        with self._pool.connection() as conn:
            row = conn.execute(
                f"SELECT * FROM {CROPS_TABLE} WHERE scrape_image_id = ?", (image_id,)
            ).fetchone()
            return self._map_row_to_record(row) if row else None

    def upsert_crop(
        self,
        image_id: str,
        rect: NormalizedRect,
        aspect_mode: AspectMode,
        is_automatic: bool,
    ) -> CropRecord:
        now = datetime.now().isoformat()
        values = rect.rounded()
        with self._pool.connection() as conn:
            conn.execute(
                f"""
                INSERT INTO {CROPS_TABLE} (
                    id, scrape_image_id, crop_x, crop_y, crop_width, crop_height,
                    aspect_ratio, is_auto, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(scrape_image_id) DO UPDATE SET
                    crop_x = excluded.crop_x,
                    crop_y = excluded.crop_y,
                    crop_width = excluded.crop_width,
                    crop_height = excluded.crop_height,
                    aspect_ratio = excluded.aspect_ratio,
                    is_auto = excluded.is_auto,
                    updated_at = excluded.updated_at
                """,
                (
                    str(uuid.uuid4()),
                    image_id,
                    int(values.x),
                    int(values.y),
                    int(values.width),
                    int(values.height),
                    aspect_mode.value,
                    1 if is_automatic else 0,
                    now,
                    now,
                ),
            )
            row = conn.execute(
                f"SELECT * FROM {CROPS_TABLE} WHERE scrape_image_id = ?", (image_id,)
            ).fetchone()
        return self._map_row_to_record(row)

    def set_cropped_url(self, crop_id: str, url: str) -> None:
        """Record where the rendered crop output was stored."""
        with self._pool.connection() as conn:
            cursor = conn.execute(
                f"UPDATE {CROPS_TABLE} SET cropped_stored_url = ?, updated_at = ? WHERE id = ?",
                (url, datetime.now().isoformat(), crop_id),
            )
            if cursor.rowcount == 0:
                raise CropNotFoundError(f"Crop {crop_id} not found")

    def delete_crop(self, crop_id: str) -> None:
        with self._pool.connection() as conn:
            cursor = conn.execute(f"DELETE FROM {CROPS_TABLE} WHERE id = ?", (crop_id,))
            if cursor.rowcount == 0:
                raise CropNotFoundError(f"Crop {crop_id} not found")

    def list_crops(self, image_ids: Iterable[str]) -> List[CropRecord]:
        ids = list(image_ids)
        if not ids:
            return []
        placeholders = ",".join("?" for _ in ids)
        with self._pool.connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM {CROPS_TABLE} WHERE scrape_image_id IN ({placeholders})",
                ids,
            ).fetchall()
        return [self._map_row_to_record(row) for row in rows]

    def delete_for_images(self, image_ids: Iterable[str]) -> int:
        ids = list(image_ids)
        if not ids:
            return 0
        placeholders = ",".join("?" for _ in ids)
        with self._pool.connection() as conn:
            cursor = conn.execute(
                f"DELETE FROM {CROPS_TABLE} WHERE scrape_image_id IN ({placeholders})",
                ids,
            )
            return cursor.rowcount

    def _map_row_to_record(self, row: sqlite3.Row) -> CropRecord:
        try:
            aspect_mode = AspectMode.parse(row["aspect_ratio"])
        except InvalidAspectModeError:
            _logger.warning("Crop %s has unknown aspect ratio %r; treating as 1:1", row["id"], row["aspect_ratio"])
            aspect_mode = AspectMode.SQUARE
        return CropRecord(
            id=row["id"],
            image_id=row["scrape_image_id"],
            rect=NormalizedRect(
                float(row["crop_x"]),
                float(row["crop_y"]),
                float(row["crop_width"]),
                float(row["crop_height"]),
            ),
            aspect_mode=aspect_mode,
            is_automatic=bool(row["is_auto"]),
            cropped_url=row["cropped_stored_url"],
            created_at=_parse_dt(row["created_at"]),
            updated_at=_parse_dt(row["updated_at"]),
        )


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
