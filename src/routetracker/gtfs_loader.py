"""GTFS static data loader."""

import io
import logging
import zipfile
from pathlib import Path
from typing import IO, Dict, Union

import pandas as pd
import requests

from .schedule import Schedule
from .table import Table

logger = logging.getLogger(__name__)

REQUIRED_FILES = ("routes.txt", "stops.txt", "stop_times.txt", "trips.txt", "calendar.txt")
OPTIONAL_FILES = ("calendar_dates.txt",)


def read_table(source: Union[str, Path, IO]) -> Table:
    """Read one GTFS CSV into a Table of string records."""
    frame = pd.read_csv(source, dtype=str, keep_default_na=False)
    frame.columns = [column.strip() for column in frame.columns]
    return Table(frame.to_dict("records"))


class GTFSLoader:
    """Loads the static GTFS tables the planner needs into a Schedule."""

    def __init__(self, timeout: float = 60):
        """
        Initialize the GTFS loader.

        Args:
            timeout: Seconds to wait for a static feed download.
        """
        self.timeout = timeout

    def load_from_directory(self, path: Union[str, Path]) -> Schedule:
        """Load GTFS data from a directory of .txt files."""
        base = Path(path)
        logger.info(f"Loading GTFS data from {base}")

        tables: Dict[str, Table] = {}
        for name in REQUIRED_FILES:
            file_path = base / name
            if not file_path.exists():
                logger.error(f"Missing required GTFS file {file_path}")
                raise FileNotFoundError(f"GTFS file not found: {file_path}")
            tables[name] = read_table(file_path)
        for name in OPTIONAL_FILES:
            file_path = base / name
            tables[name] = read_table(file_path) if file_path.exists() else Table()

        return self._build(tables)

    def load_from_zip(self, archive: Union[str, Path, bytes]) -> Schedule:
        """Load GTFS data from a zip archive given as a path or raw bytes."""
        if isinstance(archive, bytes):
            archive = io.BytesIO(archive)

        tables: Dict[str, Table] = {}
        with zipfile.ZipFile(archive) as zip_file:
            # Some agencies nest the tables in a folder inside the archive
            members = {Path(member).name: member for member in zip_file.namelist()}
            for name in REQUIRED_FILES:
                if name not in members:
                    logger.error(f"GTFS archive is missing {name}")
                    raise FileNotFoundError(f"GTFS file not found in archive: {name}")
                with zip_file.open(members[name]) as handle:
                    tables[name] = read_table(handle)
            for name in OPTIONAL_FILES:
                if name in members:
                    with zip_file.open(members[name]) as handle:
                        tables[name] = read_table(handle)
                else:
                    tables[name] = Table()

        return self._build(tables)

    def load_from_url(self, url: str) -> Schedule:
        """Download a GTFS zip and load it."""
        logger.info(f"Downloading GTFS data from {url}")
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to load GTFS data: {e}")
            raise
        return self.load_from_zip(response.content)

    @staticmethod
    def _build(tables: Dict[str, Table]) -> Schedule:
        schedule = Schedule(
            routes=tables["routes.txt"],
            stops=tables["stops.txt"],
            stop_times=tables["stop_times.txt"],
            trips=tables["trips.txt"],
            calendar=tables["calendar.txt"],
            calendar_dates=tables["calendar_dates.txt"],
        )
        logger.info(f"Loaded {schedule}")
        return schedule
