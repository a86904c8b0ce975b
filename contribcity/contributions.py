"""
Calendar glue: turns contribution calendar payloads into the weekday x week
activity matrix the layout engine consumes.
"""
import json
import logging
import os
from typing import Any, Dict, List

import noise
import numpy as np

from contribcity.errors import CalendarFormatError
from contribcity.grid import DAYS_PER_WEEK

logger = logging.getLogger(__name__)

NO_DAY = -1


def convert_contributions(weeks: List[Dict[str, Any]]) -> List[List[int]]:
    """
    Convert a GraphQL `contributionCalendar.weeks` list into a 7 x N matrix.
    Days missing from the calendar (before Jan 1st, after Dec 31st) stay -1.
    """
    if not isinstance(weeks, list):
        raise CalendarFormatError("Calendar weeks must be a list")

    result = [[NO_DAY] * len(weeks) for _ in range(DAYS_PER_WEEK)]
    for i, week in enumerate(weeks):
        try:
            days = week["contributionDays"]
        except (KeyError, TypeError):
            raise CalendarFormatError(f"Week {i} has no contributionDays") from None
        for day in days:
            try:
                weekday = int(day["weekday"])
                count = int(day["contributionCount"])
            except (KeyError, TypeError, ValueError):
                raise CalendarFormatError(f"Malformed day in week {i}: {day!r}") from None
            if not 0 <= weekday < DAYS_PER_WEEK:
                raise CalendarFormatError(f"Weekday out of range in week {i}: {weekday}")
            result[weekday][i] = count
    return result


def extract_weeks(payload: Any) -> List[Dict[str, Any]]:
    """Dig the weeks list out of a full GraphQL response or a bare calendar."""
    node = payload
    for key in ("data", "user", "contributionsCollection", "contributionCalendar"):
        if isinstance(node, dict) and key in node:
            node = node[key]
    if isinstance(node, dict):
        node = node.get("weeks")
    if not isinstance(node, list):
        raise CalendarFormatError("No contribution weeks found in payload")
    return node


def _is_matrix(payload: Any) -> bool:
    return (isinstance(payload, list) and bool(payload)
            and all(isinstance(row, list) for row in payload))


def load_calendar(path: str) -> List[List[int]]:
    """Read a calendar JSON file: either a raw matrix or a GraphQL payload."""
    if not os.path.exists(path):
        raise CalendarFormatError(f"Calendar file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        try:
            payload = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CalendarFormatError(f"Invalid JSON in {path}: {e}") from e

    if _is_matrix(payload):
        logger.debug("Loaded raw %d-row matrix from %s", len(payload), path)
        return payload
    weeks = extract_weeks(payload)
    logger.debug("Loaded %d calendar weeks from %s", len(weeks), path)
    return convert_contributions(weeks)


def sample_contributions(weeks: int = 53, seed: int = 42,
                         scale: float = 6.0, peak: int = 30) -> List[List[int]]:
    """
    Deterministic placeholder calendar for the demo city. Activity follows
    Perlin noise so busy stretches cluster into neighbourhoods.
    """
    if weeks < 1:
        raise ValueError(f"weeks must be positive, got {weeks}")
    h = np.zeros((DAYS_PER_WEEK, weeks))
    for i in range(DAYS_PER_WEEK):
        for j in range(weeks):
            h[i, j] = noise.pnoise2(i / scale, j / scale, octaves=3, base=seed % 256)

    h = (h - h.min()) / (h.max() - h.min() + 1e-9)
    # Quiet days (roads) below 0.35, then a steep ramp of activity
    counts = np.where(h < 0.35, 0, np.rint(((h - 0.35) / 0.65) ** 2 * peak)).astype(int)

    # A calendar year starts and ends mid-week
    start = seed % DAYS_PER_WEEK
    counts[:start, 0] = NO_DAY
    counts[start + 1:, weeks - 1] = NO_DAY
    return counts.tolist()
