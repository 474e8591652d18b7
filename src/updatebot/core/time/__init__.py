"""Time operations abstraction for testing."""

from updatebot.core.time.abc import Time
from updatebot.core.time.fake import FakeTime
from updatebot.core.time.real import RealTime

__all__ = ["FakeTime", "RealTime", "Time"]
