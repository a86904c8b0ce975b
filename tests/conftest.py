"""Shared test fixtures."""

from __future__ import annotations

import pytest

from tests.helpers import X, blank


@pytest.fixture
def scenario_row():
    """Only Sunday row holds days: two missing, one quiet, one busy, one huge."""
    counts = blank(5)
    counts[0] = [X, X, 0, 3, 40]
    return counts


@pytest.fixture
def zero_block():
    """3x3 block of quiet days framed by missing days."""
    counts = blank(5)
    for r in (1, 2, 3):
        counts[r] = [X, 0, 0, 0, X]
    return counts


@pytest.fixture
def mixed_counts():
    return [
        [X, 0, 4, 5, 0, 12, 0, 0],
        [0, 0, 3, 0, 0, 11, 9, 0],
        [2, 0, 0, 0, 7, 0, 0, 0],
        [1, 6, 8, 0, 40, 38, 0, 3],
        [0, 0, 0, 0, 0, 0, 0, 0],
        [3, 3, 1, 0, 22, 0, 5, 5],
        [0, 0, 0, 0, 21, 0, 0, X],
    ]


@pytest.fixture
def calendar_payload():
    return {
        "data": {
            "user": {
                "name": "octo",
                "contributionsCollection": {
                    "contributionCalendar": {
                        "totalContributions": 9,
                        "weeks": [
                            {
                                "firstDay": "2023-01-01",
                                "contributionDays": [
                                    {"date": f"2023-01-0{d + 1}", "weekday": d,
                                     "contributionCount": d}
                                    for d in range(7)
                                ],
                            },
                            {
                                "firstDay": "2023-01-08",
                                "contributionDays": [
                                    {"date": "2023-01-08", "weekday": 0, "contributionCount": 5},
                                    {"date": "2023-01-09", "weekday": 1, "contributionCount": 0},
                                ],
                            },
                        ],
                    }
                },
            }
        }
    }

