from pathlib import Path

import pytest

from vita.config.settings import load_settings
from vita.src.core.errors import ConfigurationError


def test_defaults_with_required_env(full_env):
    settings = load_settings(_env_file=None)

    assert settings.LANCEDB_URI == "db://vita-test"
    assert settings.LANCEDB_TABLE_NAME == "vita_docs"
    assert settings.GOOGLE_API_KEY.get_secret_value() == "test-google-key-1234"
    assert settings.LLM_MAX_OUTPUT_TOKENS == 8192
    assert settings.SEARCH_RESULTS_LIMIT == 1
    assert settings.CONTEXT_SOURCE == "./client.txt"
    assert settings.CONTEXT_FILE_PATH == Path("./context/client.txt")
    assert settings.SESSION_ID == "1"
    assert settings.HISTORY_WINDOW == 0
    assert settings.ENV == "prod"


@pytest.mark.parametrize("missing", ["GOOGLE_API_KEY", "LANCEDB_API_KEY", "LANCEDB_URI", "LANCEDB_TABLE_NAME"])
def test_missing_required_variable_fails_fast(full_env, missing):
    full_env.delenv(missing)

    with pytest.raises(ConfigurationError) as excinfo:
        load_settings(_env_file=None)

    assert missing in str(excinfo.value)
    assert "missing required environment variable" in str(excinfo.value)


def test_all_missing_variables_are_reported(clean_env):
    with pytest.raises(ConfigurationError) as excinfo:
        load_settings(_env_file=None)

    message = str(excinfo.value)
    for name in ("GOOGLE_API_KEY", "LANCEDB_API_KEY", "LANCEDB_URI", "LANCEDB_TABLE_NAME"):
        assert name in message


def test_blank_table_name_is_rejected(full_env):
    full_env.setenv("LANCEDB_TABLE_NAME", "   ")

    with pytest.raises(ConfigurationError, match="LANCEDB_TABLE_NAME"):
        load_settings(_env_file=None)


@pytest.mark.parametrize("name, value", [("HISTORY_WINDOW", "-1"), ("LLM_MAX_OUTPUT_TOKENS", "0"), ("LLM_TEMPERATURE", "3.5")])
def test_out_of_range_values_are_rejected(full_env, name, value):
    full_env.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name):
        load_settings(_env_file=None)


def test_secrets_are_not_exposed_in_repr(full_env):
    settings = load_settings(_env_file=None)

    assert "test-google-key-1234" not in repr(settings)
    assert "test-lancedb-key-5678" not in repr(settings)
