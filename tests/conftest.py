"""
Shared fixtures cho tests.
"""

import sys
import os

import pandas as pd
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture
def observed_at():
    """Observation instant cố định cho các tests."""
    return pd.Timestamp('2024-05-01 12:00:00', tz='UTC')


def minutes_before(observed_at, minutes, seconds=0):
    """Timestamp cách observed_at `minutes` phút (và `seconds` giây)."""
    return observed_at - pd.Timedelta(minutes=minutes, seconds=seconds)
