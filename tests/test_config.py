"""Tests for configuration loading and saving."""

from pathlib import Path

from tasklist.config import Config, ConfigModel, get_config, load_config, save_config
from tasklist.task import TaskState


class TestConfigModel:
    """Test the configuration model."""

    def test_defaults(self, isolated_home):
        config = ConfigModel()

        assert config.data_dir == str(isolated_home)
        assert config.tasks_key == "tasks"
        assert config.default_state is TaskState.NOT_DONE
        assert config.color_scheme == "light"
        assert config.get_storage_path() == Path(isolated_home) / "storage.json"

    def test_yaml_round_trip(self, tmp_path):
        config = ConfigModel(data_dir=str(tmp_path), default_state=TaskState.DOING_RIGHT_NOW,
                             color_scheme="dark", confirm_deletion=False)

        restored = ConfigModel.from_yaml(config.to_yaml())

        assert restored == config
        assert "default_state: Doing right now" in config.to_yaml()

    def test_invalid_values_fall_back(self, tmp_path):
        config = ConfigModel.from_yaml(
            f"data_dir: {tmp_path}\ndefault_state: Someday\ncolor_scheme: purple\nextra: 1\n"
        )

        assert config.default_state is TaskState.NOT_DONE
        assert config.color_scheme == "light"

    def test_data_dir_expands_user(self):
        config = ConfigModel(data_dir="~/somewhere")
        assert not config.data_dir.startswith("~")


class TestConfigManager:
    """Test loading through the Config singleton."""

    def test_load_creates_default_file(self, isolated_home):
        config = get_config()

        assert (isolated_home / "config.yaml").exists()
        assert get_config() is config

    def test_load_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        save_config(ConfigModel(data_dir=str(tmp_path / "data"), tasks_key="mine"), path)

        config = load_config(path)

        assert config.tasks_key == "mine"
        assert config.data_dir == str(tmp_path / "data")

    def test_broken_file_uses_defaults(self, tmp_path, caplog):
        path = tmp_path / "broken.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        config = load_config(path)

        assert config.tasks_key == "tasks"
        assert "Failed to load config" in caplog.text

    def test_reload(self, tmp_path):
        path = tmp_path / "custom.yaml"
        save_config(ConfigModel(data_dir=str(tmp_path), color_scheme="dark"), path)
        load_config(path)

        save_config(ConfigModel(data_dir=str(tmp_path), color_scheme="light"), path)
        assert Config.reload(path).color_scheme == "light"
