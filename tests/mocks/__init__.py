"""Shared mock factories for test suite."""

from tests.mocks.sources import (
    FailingSource,
    FakeAwardKickoffSource,
    FakeBenchUtilizationSource,
    FakeFeedbackSource,
    FakeMatchHealthSource,
    FakeParticipationSource,
    FakeThreadActivitySource,
    SlowSource,
    SourceMocks,
    UnavailableSource,
)

__all__ = [
    "FailingSource",
    "FakeAwardKickoffSource",
    "FakeBenchUtilizationSource",
    "FakeFeedbackSource",
    "FakeMatchHealthSource",
    "FakeParticipationSource",
    "FakeThreadActivitySource",
    "SlowSource",
    "SourceMocks",
    "UnavailableSource",
]
