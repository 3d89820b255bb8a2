"""Shared fixtures for rdstext tests."""

import pytest

from rdstext.models.schemas import UNIT_SEPARATOR_SYMBOL, NormalizationConfig
from rdstext.pipeline.orchestrator import RdsTextPipeline

US = UNIT_SEPARATOR_SYMBOL


def make_config(**overrides):
    """NormalizationConfig with test overrides."""
    return NormalizationConfig(**overrides)


def record(artist, title):
    """Raw record joined with the default delimiter."""
    return f"{artist}{US}{title}"


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def pipeline():
    return RdsTextPipeline(make_config())


@pytest.fixture
def ascii_pipeline():
    return RdsTextPipeline(make_config(ascii_safe_enabled=True))


@pytest.fixture
def translit_pipeline():
    return RdsTextPipeline(make_config(transliteration_enabled=True))
