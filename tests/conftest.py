from __future__ import annotations

import pytest

from fake_gmail import FakeNotifier, fast_settings


@pytest.fixture
def settings():
    return fast_settings()


@pytest.fixture
def notifier():
    return FakeNotifier()
