"""
Temporal Parser

Resolves relative time phrases ("yesterday", "上周", "il y a 3 jours") into
absolute UTC date ranges. Pure: the reference instant is passed in, so the
same text at the same instant always yields the same range.

Weeks start on Sunday. Day ranges are closed [00:00, 23:59:59.999999].
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

from ..common.schemas.query import DateRange
from .language_packs import LANGUAGE_PACKS, TEMPORAL_PERIODS, LanguagePack

logger = logging.getLogger("lifelog.router.temporal_parser")

_ONE_TICK = timedelta(microseconds=1)


@dataclass(frozen=True)
class TemporalMatch:
    """A resolved time phrase"""
    range: Optional[DateRange] = None
    matched_pattern: Optional[str] = None  # period key, e.g. "last_week" or "days_ago"
    matched_text: Optional[str] = None
    position: int = -1

    @property
    def found(self) -> bool:
        return self.range is not None


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def _day(moment: datetime, label: str) -> DateRange:
    return DateRange(start_of_day(moment), end_of_day(moment), label=label)


def _week_start(now: datetime) -> datetime:
    """Most recent Sunday 00:00 (today when today is Sunday)"""
    days_since_sunday = (now.weekday() + 1) % 7
    return start_of_day(now) - timedelta(days=days_since_sunday)


def _month_start(moment: datetime) -> datetime:
    return start_of_day(moment).replace(day=1)


def _this_week(now: datetime) -> DateRange:
    return DateRange(_week_start(now), now, label="this_week")


def _last_week(now: datetime) -> DateRange:
    this_start = _week_start(now)
    return DateRange(this_start - timedelta(days=7), this_start - _ONE_TICK, label="last_week")


def _this_month(now: datetime) -> DateRange:
    return DateRange(_month_start(now), now, label="this_month")


def _last_month(now: datetime) -> DateRange:
    this_start = _month_start(now)
    prev_end = this_start - _ONE_TICK
    return DateRange(_month_start(prev_end), prev_end, label="last_month")


def _this_year(now: datetime) -> DateRange:
    return DateRange(_month_start(now).replace(month=1), now, label="this_year")


def _last_year(now: datetime) -> DateRange:
    this_start = _month_start(now).replace(month=1)
    prev_end = this_start - _ONE_TICK
    return DateRange(this_start.replace(year=this_start.year - 1), prev_end, label="last_year")


_PERIOD_RESOLVERS: Dict[str, Callable[[datetime], DateRange]] = {
    "day_before_yesterday": lambda now: _day(now - timedelta(days=2), "day_before_yesterday"),
    "today": lambda now: _day(now, "today"),
    "yesterday": lambda now: _day(now - timedelta(days=1), "yesterday"),
    "this_week": _this_week,
    "last_week": _last_week,
    "this_month": _this_month,
    "last_month": _last_month,
    "this_year": _this_year,
    "last_year": _last_year,
}


def _normalize_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def resolve_period(key: str, now: Optional[datetime] = None) -> DateRange:
    """Range for a named period (e.g. "this_week") at a reference instant"""
    return _PERIOD_RESOLVERS[key](_normalize_now(now))


class TemporalParser:
    """
    Ordered relative-time pattern table, tried across every language pack.

    Priority: day (day before yesterday, today, yesterday) > week > month >
    year > "N days/weeks ago". Within a priority level every language is
    tried before moving to the next level.
    """

    def __init__(self, packs: Optional[List[LanguagePack]] = None):
        self._packs = list(packs) if packs is not None else list(LANGUAGE_PACKS)

    def parse(self, text, now: Optional[datetime] = None) -> TemporalMatch:
        """
        Resolve the highest-priority time phrase in text.

        Args:
            text: Raw question text
            now: Reference instant (default: current UTC time)

        Returns:
            TemporalMatch; range is None when no phrase matched
        """
        if not isinstance(text, str) or not text.strip():
            return TemporalMatch()

        now = _normalize_now(now)

        for period in TEMPORAL_PERIODS:
            for pack in self._packs:
                regex = pack.periods.get(period)
                if regex is None:
                    continue
                match = regex.search(text)
                if match:
                    return self._resolved(period, _PERIOD_RESOLVERS[period](now), match.group(0), match.start())

        for unit_key, days_per_unit in (("days_ago", 1), ("weeks_ago", 7)):
            for pack in self._packs:
                for regex in getattr(pack, unit_key):
                    match = regex.search(text)
                    if match:
                        date_range = self._ago(now, int(match.group(1)) * days_per_unit, unit_key)
                        if date_range is None:
                            continue
                        return self._resolved(unit_key, date_range, match.group(0), match.start())

        logger.debug("No time phrase in %r", text)
        return TemporalMatch()

    def parse_all(self, text, now: Optional[datetime] = None) -> List[TemporalMatch]:
        """
        Resolve every distinct time phrase in text, in the order they appear.

        A phrase nested inside a higher-priority phrase ("hier" inside
        "avant-hier") is not reported separately. Phrases resolving to the
        same range are reported once.
        """
        if not isinstance(text, str) or not text.strip():
            return []

        now = _normalize_now(now)
        candidates: List[Tuple[int, int, int, str, str, DateRange]] = []

        for priority, period in enumerate(TEMPORAL_PERIODS):
            for pack in self._packs:
                regex = pack.periods.get(period)
                if regex is None:
                    continue
                for match in regex.finditer(text):
                    candidates.append((
                        priority, match.start(), match.end(), period, match.group(0),
                        _PERIOD_RESOLVERS[period](now),
                    ))

        base = len(TEMPORAL_PERIODS)
        for offset, (unit_key, days_per_unit) in enumerate((("days_ago", 1), ("weeks_ago", 7))):
            for pack in self._packs:
                for regex in getattr(pack, unit_key):
                    for match in regex.finditer(text):
                        date_range = self._ago(now, int(match.group(1)) * days_per_unit, unit_key)
                        if date_range is None:
                            continue
                        candidates.append((
                            base + offset, match.start(), match.end(), unit_key, match.group(0), date_range,
                        ))

        accepted: List[Tuple[int, int, str, str, DateRange]] = []
        for _priority, start, end, key, matched, date_range in sorted(candidates, key=lambda c: c[:3]):
            if any(start < a_end and a_start < end for a_start, a_end, *_ in accepted):
                continue
            accepted.append((start, end, key, matched, date_range))

        results: List[TemporalMatch] = []
        seen = set()
        for start, _end, key, matched, date_range in sorted(accepted, key=lambda a: a[0]):
            bounds = (date_range.start, date_range.end)
            if bounds in seen:
                continue
            seen.add(bounds)
            results.append(TemporalMatch(range=date_range, matched_pattern=key, matched_text=matched, position=start))
        return results

    @staticmethod
    def _ago(now: datetime, days: int, label: str) -> Optional[DateRange]:
        try:
            return _day(now - timedelta(days=days), label)
        except OverflowError:
            logger.debug("Ignoring out-of-range offset of %d days", days)
            return None

    @staticmethod
    def _resolved(key: str, date_range: DateRange, matched: str, position: int) -> TemporalMatch:
        logger.debug("Time phrase %r -> %s", matched, date_range.describe())
        return TemporalMatch(range=date_range, matched_pattern=key, matched_text=matched, position=position)
