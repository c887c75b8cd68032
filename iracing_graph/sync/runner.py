"""Run entity pipelines over everything a provider returns."""

import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from . import DataProvider, SyncFailure, SyncResult
from ..dao.base import EntityDao
from ..dao.car import CarDao
from ..dao.track import TrackDao
from ..logger import LoggerService


class JsonFileProvider:
    """Reads exported iRacing responses from ``cars.json`` and ``tracks.json``."""

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)

    def _load(self, filename: str) -> List[Dict[str, Any]]:
        path = self.data_dir / filename
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON array")
        return data

    def get_all_cars(self) -> List[Dict[str, Any]]:
        return self._load("cars.json")

    def get_all_tracks(self) -> List[Dict[str, Any]]:
        return self._load("tracks.json")


class SyncRunner:
    """Synchronizes cars and tracks, isolating failures per record.

    Every record gets its own transaction, so one bad record never
    affects the others. With ``max_workers`` above 1 records are written
    concurrently from a thread pool.
    """

    def __init__(
        self,
        provider: DataProvider,
        cars: CarDao,
        tracks: TrackDao,
        max_workers: int = 1,
        logger: Optional[LoggerService] = None
    ):
        """Initialize the runner.

        Args:
            provider: Source of raw records
            cars: Car pipeline
            tracks: Track pipeline
            max_workers: Concurrent pipeline calls per entity type
            logger: Logger; a package logger is created if omitted
        """
        self.provider = provider
        self.cars = cars
        self.tracks = tracks
        self.max_workers = max(1, max_workers)
        self.logger = logger or LoggerService(__name__)

    def sync_cars(self) -> SyncResult:
        return self._sync(self.cars, self.provider.get_all_cars)

    def sync_tracks(self) -> SyncResult:
        return self._sync(self.tracks, self.provider.get_all_tracks)

    def sync_all(self) -> Dict[str, SyncResult]:
        """Cars first, then tracks; results keyed by node label."""
        return {
            self.cars.label: self.sync_cars(),
            self.tracks.label: self.sync_tracks(),
        }

    def _sync(
        self,
        dao: EntityDao,
        fetch: Callable[[], List[Dict[str, Any]]]
    ) -> SyncResult:
        result = SyncResult(label=dao.label)

        try:
            records = fetch()
        except Exception as e:
            self.logger.error(e, f"Failed to fetch {dao.label} records")
            result.fetch_error = SyncFailure(None, None, type(e).__name__, str(e))
            return result

        result.total = len(records)
        self.logger.log("info", f"Syncing {dao.label} records", {"total": result.total})

        if self.max_workers == 1:
            for index, raw in enumerate(records):
                self._record(result, dao, index, raw, lambda: dao.create_from_source(raw))
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                futures = {
                    pool.submit(dao.create_from_source, raw): (index, raw)
                    for index, raw in enumerate(records)
                }
                for future in as_completed(futures):
                    index, raw = futures[future]
                    self._record(result, dao, index, raw, future.result)

        result.errors.sort(key=lambda e: e.index)
        self.logger.log("info", f"Synced {dao.label} records", {
            "total": result.total,
            "synced": result.synced,
            "failed": result.failed,
        })
        return result

    def _record(
        self,
        result: SyncResult,
        dao: EntityDao,
        index: int,
        raw: Any,
        outcome: Callable[[], Any]
    ) -> None:
        try:
            outcome()
        except Exception as e:
            record_id = raw.get(dao.source_key) if isinstance(raw, dict) else None
            self.logger.error(e, f"Failed to sync {dao.label} #{index} (id={record_id})")
            result.failed += 1
            result.errors.append(SyncFailure(index, record_id, type(e).__name__, str(e)))
        else:
            result.synced += 1
