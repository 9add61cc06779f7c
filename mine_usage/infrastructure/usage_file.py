"""
Flat-file storage for usage records.

One record per line, `site,date,water,land`, no header, UTF-8. Every save
rewrites the whole file: the new contents go to a sibling `.tmp` file
which is then renamed over the target, so an interrupted save leaves the
previous file intact.
"""

import logging
from pathlib import Path
from typing import List, Sequence

from mine_usage.domain.errors import ParseError

logger = logging.getLogger(__name__)


class UsageFileStore:
    """UsageStore backed by a single text file."""

    def __init__(self, path: str | Path):
        """
        Initialize store.

        Args:
            path: Location of the usage file. It does not need to exist yet.
        """
        self.path = Path(path)

    @property
    def temp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def exists(self) -> bool:
        return self.path.exists()

    def read_lines(self) -> List[str]:
        """
        Read every line of the usage file.

        Raises:
            ParseError: A line is not valid UTF-8
            OSError: The file exists but cannot be read
        """
        if not self.path.exists():
            logger.info(f"No usage file at {self.path}, starting empty")
            return []

        lines = []
        with open(self.path, 'rb') as f:
            for line_number, raw in enumerate(f, start=1):
                try:
                    text = raw.decode('utf-8')
                except UnicodeDecodeError as e:
                    raise ParseError(f"not valid UTF-8 text ({e.reason})", line_number=line_number) from e
                lines.append(text.rstrip("\r\n"))

        logger.debug(f"Read {len(lines)} lines from {self.path}")
        return lines

    def write_lines(self, lines: Sequence[str]) -> None:
        """
        Replace the usage file with `lines`.

        Raises:
            OSError: The file could not be written
            UnicodeEncodeError: A line cannot be encoded as UTF-8
        """
        tmp = self.temp_path
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, 'w', encoding='utf-8', newline="\n") as f:
                for line in lines:
                    f.write(line + "\n")
            tmp.replace(self.path)
        except (OSError, UnicodeError):
            if tmp.is_file():
                tmp.unlink()
            raise

        logger.debug(f"Wrote {len(lines)} lines to {self.path}")
