from datetime import datetime, tzinfo
from typing import Dict, List, Optional

from alert_data import region
from alert_data.region import RegionID
from alert_data.scraper.errors import UnknownRegionError
from alert_data.scraper.types import Status
from alert_data.scraper.tz import ZERO_TIME, load_timezone
from alert_data.utils import metrics
from alert_data.utils.rwlock import ReadWriteLock


class AlertData:
    """
    Alert status of every registered region.

    Writes follow a monotonic merge: a status older than the one on file is
    dropped, an equal or newer one replaces it. Safe to read from any thread
    while the scraper writes.
    """

    def __init__(self, tz: Optional[tzinfo] = None):
        self._lock = ReadWriteLock()
        self._data: Dict[RegionID, Status] = {}
        tz = tz or load_timezone()

        # assume the alert is off everywhere until history says otherwise
        for region_id, _ in region.iterate():
            self.set(Status(region=region_id, enabled=False, updated_at=ZERO_TIME, is_history=True))

        # Crimea and Luhansk have been under a continuous alert since 2022,
        # far beyond any history window worth scraping
        self.set(Status(
            region=RegionID.CRIMEA,
            enabled=True,
            updated_at=datetime(2022, 12, 11, 0, 22, tzinfo=tz),
            is_history=True,
        ))
        self.set(Status(
            region=RegionID.LUHANSK,
            enabled=True,
            updated_at=datetime(2022, 4, 4, 19, 45, tzinfo=tz),
            is_history=True,
        ))

    def get(self, region_id: RegionID) -> Status:
        """Current status of a region. Raises UnknownRegionError for unregistered ids."""
        with self._lock.read_locked():
            status = self._data.get(region_id)
        if status is None:
            raise UnknownRegionError(f"scraper: invalid region '{region_id}'")
        return status

    def set(self, status: Optional[Status]) -> bool:
        """Merge a status; returns False if it was older than the one on file."""
        if status is None:
            return False

        with self._lock.write_locked():
            current = self._data.get(status.region)
            if current is not None and status.updated_at < current.updated_at:
                stale = True
            else:
                stale = False
                self._data[status.region] = status
                active = sum(1 for s in self._data.values() if s.enabled)

        if stale:
            metrics.STATUSES_STALE.inc()
            return False
        metrics.ACTIVE_REGIONS.set(active)
        return True

    def snapshot(self) -> Dict[RegionID, Status]:
        with self._lock.read_locked():
            return dict(self._data)

    def active_regions(self) -> List[RegionID]:
        return sorted(region_id for region_id, status in self.snapshot().items() if status.enabled)
