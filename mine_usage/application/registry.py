"""
Registry of configured mines and their usage records.

The registry is built once per process from the configured site table,
fills itself from the store, and writes the full state back after every
accepted usage entry.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Mapping, Tuple

from mine_usage.config.config import Config
from mine_usage.domain.errors import AppError, ErrorCode, Result, Ok, Err
from mine_usage.domain.protocols import UsageStore
from mine_usage.domain.types import Site, SiteReport, SiteSummary, UsageRecord
from mine_usage.infrastructure.usage_file import UsageFileStore

logger = logging.getLogger(__name__)

UNKNOWN_SITE_MESSAGE = "Unknown mine, please provide documentation."
NO_RECORDS_MESSAGE = "No records found for this mine."


class Registry:
    """
    Owns every configured Site and routes usage requests to them.

    Usage:
        registry = Registry(UsageFileStore("mine_usage.txt"), {"Rosemont": 6000})
        result = registry.record_usage("Rosemont", 500, 2, "2024-01-01")
        if result.is_err:
            print(result.error.message)
    """

    def __init__(self, store: UsageStore, site_limits: Mapping[str, Decimal]):
        """
        Initialize registry and load persisted records.

        Args:
            store: Backend holding the serialized records
            site_limits: Site name -> annual water limit (acre-feet)

        Raises:
            ParseError: If the stored data is malformed
            OSError: If the store cannot be read
        """
        self.store = store
        self._sites: Dict[str, Site] = {
            name: Site(name, limit) for name, limit in site_limits.items()
        }
        self.load_all()

    @classmethod
    def from_config(cls, config: Config) -> 'Registry':
        """Build a registry backed by the configured usage file."""
        return cls(UsageFileStore(config.storage.data_file), config.sites)

    @property
    def site_names(self) -> List[str]:
        return list(self._sites)

    def load_all(self) -> None:
        """
        Replace the empty default sites with whatever the store holds.

        Lines are grouped by their leading site name. Groups for names that
        are not configured are skipped. Nothing is applied unless every
        configured group parses.
        """
        groups: Dict[str, List[Tuple[int, str]]] = defaultdict(list)
        for number, line in enumerate(self.store.read_lines(), start=1):
            if not line.strip():
                continue
            name = line.split(",", 1)[0]
            groups[name].append((number, line))

        loaded: Dict[str, Site] = {}
        for name, numbered in groups.items():
            if name not in self._sites:
                logger.warning(f"Ignoring {len(numbered)} stored records for unknown site {name!r}")
                continue

            limit = self._sites[name].water_limit
            site = Site.from_lines(
                [line for _, line in numbered],
                limit,
                line_numbers=[number for number, _ in numbered],
            )
            if site.total_water_used() > limit:
                logger.warning(
                    f"Stored usage for {name} ({site.total_water_used():.2f}) "
                    f"is above its limit ({limit:.2f})"
                )
            loaded[name] = site

        self._sites.update(loaded)
        for name, site in loaded.items():
            logger.info(f"Loaded {len(site.records)} records for {name}")

    def serialize_all(self) -> List[str]:
        lines: List[str] = []
        for site in self._sites.values():
            lines.extend(site.serialize_all())
        return lines

    def save_all(self) -> None:
        """Overwrite the store with every site's records, in registry order."""
        self.store.write_lines(self.serialize_all())

    def persist(self) -> None:
        """Make the current in-memory state durable. Raises OSError on failure."""
        self.save_all()

    def record_usage(self, site_name: str, water, land, date: str) -> Result[UsageRecord, AppError]:
        """
        Record usage against a site and save.

        Args:
            site_name: Configured site name (case-sensitive)
            water: Water used, acre-feet
            land: Land used, acres
            date: Free-text date, normally YYYY-MM-DD

        Returns:
            Ok(record) once saved; Err(UNKNOWN_SITE), Err(INVALID) or
            Err(LIMIT_EXCEEDED) with nothing changed; Err(IO) if the save
            failed, in which case the record is not kept.
        """
        site = self._sites.get(site_name)
        if site is None:
            logger.warning(f"Usage submitted for unknown site {site_name!r}")
            return Err(AppError(ErrorCode.UNKNOWN_SITE, UNKNOWN_SITE_MESSAGE, {"site": site_name}))

        result = site.add_usage(water, land, date)
        if result.is_err:
            logger.warning(f"Rejected usage for {site_name}: {result.error}")
            return result

        try:
            self.persist()
        except (OSError, UnicodeError) as e:
            site.discard_last()
            logger.error(f"Failed to save usage data: {e}")
            return Err(AppError(
                ErrorCode.IO,
                f"Could not save usage data: {e}",
                {"site": site_name},
            ))

        record = result.value
        logger.info(
            f"Recorded {record.water_usage:.2f} acre-feet / {record.land_usage:.2f} acres "
            f"for {site_name} on {record.date} (remaining: {site.water_remaining():.2f})"
        )
        return result

    def get_records(self, site_name: str) -> Result[SiteReport, AppError]:
        """Report for one site. A configured site with no records gets an empty report."""
        site = self._sites.get(site_name)
        if site is None:
            return Err(AppError(ErrorCode.UNKNOWN_SITE, NO_RECORDS_MESSAGE, {"site": site_name}))
        return Ok(site.format_report())

    def water_remaining(self, site_name: str) -> Result[Decimal, AppError]:
        site = self._sites.get(site_name)
        if site is None:
            return Err(AppError(ErrorCode.UNKNOWN_SITE, UNKNOWN_SITE_MESSAGE, {"site": site_name}))
        return Ok(site.water_remaining())

    def summary(self) -> List[SiteSummary]:
        return [site.summarize() for site in self._sites.values()]
