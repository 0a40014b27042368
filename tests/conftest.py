import pytest

from alert_data.scraper.tz import load_timezone


@pytest.fixture
def kyiv():
    return load_timezone("Europe/Kyiv")
