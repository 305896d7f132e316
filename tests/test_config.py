import pytest

from reportdsl.config import ConfigError, TableMappingConfig


def test_load_valid_json_config(tmp_path):
    path = tmp_path / "test_table_mapping.json"
    path.write_text(
        '{\n "Test": "tests",\n "Run": "test_runs",\n "Project": "projects"\n}\n',
        encoding="utf-8",
    )
    config = TableMappingConfig.from_json_file(path)
    assert config.get_table_name("Test") == "tests"
    assert config.get_table_name("Run") == "test_runs"
    assert config.get_table_name("Unknown") == "unknown"
    assert config.mappings == {"Test": "tests", "Run": "test_runs", "Project": "projects"}


def test_load_accepts_string_path(tmp_path):
    path = tmp_path / "m.json"
    path.write_text('{"Task": "tasks"}', encoding="utf-8")
    assert TableMappingConfig.from_json_file(str(path)).get_table_name("Task") == "tasks"


def test_invalid_json_config(tmp_path):
    path = tmp_path / "test_invalid.json"
    path.write_text("invalid json\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        TableMappingConfig.from_json_file(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError) as info:
        TableMappingConfig.from_json_file(tmp_path / "non_existent_file.json")
    assert "non_existent_file.json" in info.value.message


def test_non_string_values_are_rejected(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{"Test": 1}', encoding="utf-8")
    with pytest.raises(ConfigError):
        TableMappingConfig.from_json_file(path)


def test_non_object_json_is_rejected(tmp_path):
    path = tmp_path / "list.json"
    path.write_text('["Test", "tests"]', encoding="utf-8")
    with pytest.raises(ConfigError):
        TableMappingConfig.from_json_file(path)


def test_directory_cannot_be_read(tmp_path):
    with pytest.raises(ConfigError):
        TableMappingConfig.from_json_file(tmp_path)


def test_default_config():
    config = TableMappingConfig.default()
    assert config.get_table_name("Test") == "tests"
    assert config.get_table_name("Issue") == "issues"
    assert config.get_table_name("Unknown") == "unknown"


def test_config_error_message_and_str():
    error = ConfigError("broken")
    assert error.message == "broken"
    assert str(error) == "configuration error: broken"