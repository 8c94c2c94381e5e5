# tests/unit/test_settings.py
import pytest

from paginated_select_engine.exceptions import InvalidConfigurationError
from paginated_select_engine.settings import SelectSettings


def test_defaults_come_from_environment_config():
    settings = SelectSettings.from_env()

    assert settings.page_size == 10
    assert settings.debounce_seconds == pytest.approx(0.3)
    assert settings.fetch_timeout_seconds == 30
    assert settings.lookup_timeout_seconds == 30
    assert settings.debug is False

def test_none_overrides_fall_back_to_defaults():
    settings = SelectSettings.from_env(page_size=None, debug=True)

    assert settings.page_size == 10
    assert settings.debug is True

@pytest.mark.parametrize(
    "overrides",
    [
        {"page_size": 0},
        {"page_size": -1},
        {"debounce_seconds": -0.1},
        {"fetch_timeout_seconds": -5},
        {"unknown_option": 1},
    ],
)
def test_invalid_values_raise_configuration_error(overrides):
    with pytest.raises(InvalidConfigurationError):
        SelectSettings.from_env(**overrides)

def test_with_overrides_keeps_disabled_timeouts(fast_settings):
    """
    GIVEN settings with adapter timeouts disabled
    WHEN only the page size is overridden
    THEN the timeouts stay disabled instead of reverting to the defaults.
    """
    settings = fast_settings.with_overrides(page_size=50, debug=None)

    assert settings.page_size == 50
    assert settings.fetch_timeout_seconds is None
    assert settings.lookup_timeout_seconds is None
    assert settings.debug is True

def test_with_overrides_validates(fast_settings):
    with pytest.raises(InvalidConfigurationError):
        fast_settings.with_overrides(page_size=0)
