"""
Domain types for the mine usage tracker.

Amounts are Decimals held at two decimal places, which is also the
precision of the usage file, so a record read back from disk compares
equal to the one that was written.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence, Tuple

from mine_usage.domain.errors import AppError, ErrorCode, ParseError, Result, Ok, Err

CENT = Decimal("0.01")


def to_amount(value) -> Decimal:
    """
    Convert a user or file supplied quantity to a two-place Decimal.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite():
            raise ValueError(f"Not a finite number: {value!r}")
        amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}") from None
    # Avoid writing "-0.00"
    if amount == 0:
        amount = abs(amount)
    return amount


def check_date(date: str) -> Optional[str]:
    """Return a problem description if `date` cannot be stored, else None."""
    if not isinstance(date, str) or not date.strip():
        return "Date is required"
    if "," in date or "\n" in date or "\r" in date:
        return f"Date may not contain commas or line breaks: {date!r}"
    try:
        date.encode("utf-8")
    except UnicodeEncodeError:
        return f"Date is not valid text: {date!r}"
    return None


# ============================================================================
# Value Objects
# ============================================================================


@dataclass(frozen=True)
class UsageRecord:
    """
    One dated entry of water (acre-feet) and land (acres) consumption.

    The date is free text supplied by whoever records the usage; it is
    not checked against the calendar.
    """

    date: str
    water_usage: Decimal
    land_usage: Decimal

    def __init__(self, date: str, water_usage, land_usage):
        object.__setattr__(self, 'date', date)
        object.__setattr__(self, 'water_usage', to_amount(water_usage))
        object.__setattr__(self, 'land_usage', to_amount(land_usage))

    def serialize(self) -> str:
        """Format as `date,water,land` with both amounts to 2 decimals."""
        return f"{self.date},{self.water_usage:.2f},{self.land_usage:.2f}"

    @classmethod
    def deserialize(cls, line: str) -> 'UsageRecord':
        """
        Parse a `date,water,land` line.

        Raises:
            ParseError: On a wrong field count, a non-numeric or negative
                amount, or an empty date.
        """
        parts = line.split(",")
        if len(parts) != 3:
            raise ParseError(f"expected 3 fields (date,water,land), got {len(parts)}", line=line)

        date, water_text, land_text = parts
        problem = check_date(date)
        if problem:
            raise ParseError(problem, line=line)

        try:
            water = to_amount(water_text)
            land = to_amount(land_text)
        except ValueError as e:
            raise ParseError(str(e), line=line) from e

        if water < 0 or land < 0:
            raise ParseError("usage amounts must not be negative", line=line)

        return cls(date, water, land)

    def describe(self) -> str:
        return (
            f"Date: {self.date}, Water used: {self.water_usage:.2f} acre-feet, "
            f"Land used: {self.land_usage:.2f} acres"
        )


@dataclass(frozen=True)
class SiteReport:
    """Read-only view of a site's records, as shown to the user."""

    site: str
    water_limit: Decimal
    records: Tuple[UsageRecord, ...]
    total_water_used: Decimal
    water_remaining: Decimal

    @property
    def summary_line(self) -> str:
        return (
            f"Total water used: {self.total_water_used:.2f} acre-feet, "
            f"Water remaining: {self.water_remaining:.2f} acre-feet"
        )

    def lines(self) -> List[str]:
        """One line per record followed by the totals line."""
        return [record.describe() for record in self.records] + [self.summary_line]


@dataclass(frozen=True)
class SiteSummary:
    """Per-site totals for the overview table."""

    site: str
    water_limit: Decimal
    water_used: Decimal
    water_remaining: Decimal
    land_used: Decimal
    record_count: int

    @property
    def percent_used(self) -> float:
        if self.water_limit == 0:
            return 0.0
        return float(self.water_used / self.water_limit * 100)


# ============================================================================
# Entities
# ============================================================================


@dataclass
class Site:
    """
    A mining operation with a fixed annual water allowance.

    Records are kept in the order they were entered. Usage accepted
    through add_usage never pushes total water above water_limit.
    """

    name: str
    water_limit: Decimal
    records: List[UsageRecord] = field(default_factory=list)

    def __post_init__(self):
        self.water_limit = to_amount(self.water_limit)

    def total_water_used(self) -> Decimal:
        return sum((r.water_usage for r in self.records), Decimal("0.00"))

    def total_land_used(self) -> Decimal:
        return sum((r.land_usage for r in self.records), Decimal("0.00"))

    def water_remaining(self) -> Decimal:
        return self.water_limit - self.total_water_used()

    def add_usage(self, water, land, date: str) -> Result[UsageRecord, AppError]:
        """
        Append a usage record if the water allowance covers it.

        Using exactly the remaining allowance is accepted. On any error
        the site is left untouched.

        Returns:
            Ok(record) on success, Err(INVALID) for unusable input or
            Err(LIMIT_EXCEEDED) when water exceeds what is left.
        """
        problem = check_date(date)
        if problem:
            return Err(AppError(ErrorCode.INVALID, problem, {"site": self.name}))

        try:
            record = UsageRecord(date, water, land)
        except ValueError as e:
            return Err(AppError(ErrorCode.INVALID, str(e), {"site": self.name}))

        if record.water_usage < 0 or record.land_usage < 0:
            return Err(AppError(
                ErrorCode.INVALID,
                "Usage amounts must not be negative",
                {"site": self.name},
            ))

        remaining = self.water_remaining()
        if record.water_usage > remaining:
            return Err(AppError(
                ErrorCode.LIMIT_EXCEEDED,
                "Water usage exceeds the limit for the year.",
                {
                    "site": self.name,
                    "requested": f"{record.water_usage:.2f}",
                    "remaining": f"{remaining:.2f}",
                },
            ))

        self.records.append(record)
        return Ok(record)

    def discard_last(self) -> UsageRecord:
        """Remove and return the most recent record (used to undo a failed save)."""
        return self.records.pop()

    def serialize_all(self) -> List[str]:
        """One `name,date,water,land` line per record."""
        return [f"{self.name},{record.serialize()}" for record in self.records]

    @classmethod
    def from_lines(
        cls,
        lines: Sequence[str],
        water_limit,
        line_numbers: Optional[Iterable[int]] = None,
    ) -> 'Site':
        """
        Rebuild a site from its serialized lines.

        The site is named after the first field of the first line; every
        line must carry the same name. Records are appended as read,
        without checking them against the limit.

        Args:
            lines: Lines as produced by serialize_all
            water_limit: Configured limit for the site
            line_numbers: Optional file line numbers, parallel to lines,
                used in error messages

        Raises:
            ParseError: If lines is empty or any line is malformed
        """
        if not lines:
            raise ParseError("no lines to load")

        numbers = list(line_numbers) if line_numbers is not None else [None] * len(lines)
        site = cls(lines[0].split(",", 1)[0], water_limit)

        for number, line in zip(numbers, lines):
            name, sep, rest = line.partition(",")
            if not sep:
                raise ParseError("missing fields", line=line, line_number=number)
            if name != site.name:
                raise ParseError(
                    f"site {name!r} does not match {site.name!r}", line=line, line_number=number
                )
            try:
                site.records.append(UsageRecord.deserialize(rest))
            except ParseError as e:
                raise ParseError(e.reason, line=line, line_number=number) from e

        return site

    def format_report(self) -> SiteReport:
        return SiteReport(
            site=self.name,
            water_limit=self.water_limit,
            records=tuple(self.records),
            total_water_used=self.total_water_used(),
            water_remaining=self.water_remaining(),
        )

    def summarize(self) -> SiteSummary:
        return SiteSummary(
            site=self.name,
            water_limit=self.water_limit,
            water_used=self.total_water_used(),
            water_remaining=self.water_remaining(),
            land_used=self.total_land_used(),
            record_count=len(self.records),
        )
