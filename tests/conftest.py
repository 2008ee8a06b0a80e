import copy

import pytest

from tokfetch.config.settings_manager import DEFAULT_SETTINGS


@pytest.fixture
def settings():
    return copy.deepcopy(DEFAULT_SETTINGS)
