"""Pytest configuration shared across the latentcorr tests."""
from __future__ import annotations

import logging

import pytest


@pytest.fixture
def debug_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture DEBUG records from the latentcorr logger tree."""
    caplog.set_level(logging.DEBUG, logger="latentcorr")
    return caplog
