from pathlib import Path

import pytest
from pydantic import ValidationError

from core import config as config_module
from core.config import AppSettings, write_user_env_vars
from core.domain.policies import EmptyCommitPolicy


def test_defaults_match_original_build_file():
    settings = AppSettings(_env_file=None)

    assert settings.destination_dir is None
    assert settings.crate_name == "svg_web"
    assert settings.out_dir_name == "pkg"
    assert settings.static_assets == ["index.html", "style.css", "index.js"]
    assert settings.build_target == "no-modules"
    assert settings.release is True
    assert settings.commit_message == "update"
    assert settings.command_timeout_seconds is None
    assert settings.empty_commit_policy is EmptyCommitPolicy.SKIP


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("WEBPUB_DESTINATION_DIR", str(tmp_path / "site"))
    monkeypatch.setenv("WEBPUB_COMMAND_TIMEOUT_SECONDS", "30")
    monkeypatch.setenv("WEBPUB_EMPTY_COMMIT_POLICY", "fail")

    settings = AppSettings(_env_file=None)

    assert settings.destination_dir == tmp_path / "site"
    assert settings.command_timeout_seconds == 30.0
    assert settings.empty_commit_policy is EmptyCommitPolicy.FAIL


def test_init_kwargs_win_over_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("WEBPUB_DESTINATION_DIR", str(tmp_path / "from-env"))

    settings = AppSettings(_env_file=None, destination_dir=tmp_path / "from-flag")

    assert settings.destination_dir == tmp_path / "from-flag"


def test_dotenv_file_in_working_directory(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("WEBPUB_CRATE_NAME=viewer\n", encoding="utf-8")

    settings = AppSettings(_env_file=env_file)

    assert settings.crate_name == "viewer"


def test_rejects_non_positive_timeout():
    with pytest.raises(ValidationError):
        AppSettings(_env_file=None, command_timeout_seconds=0)


def test_build_output_dir(tmp_path):
    settings = AppSettings(_env_file=None, project_dir=tmp_path, out_dir_name="dist")

    assert settings.build_output_dir == tmp_path / "dist"


def test_write_user_env_vars_merges_existing_values(tmp_path, monkeypatch):
    env_path = tmp_path / "config" / ".env"
    monkeypatch.setattr(config_module, "get_user_env_file", lambda: env_path)

    write_user_env_vars({"WEBPUB_CRATE_NAME": "viewer"})
    write_user_env_vars({"WEBPUB_DESTINATION_DIR": "/srv/site", "WEBPUB_GIT_BIN": None})

    lines = env_path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert "WEBPUB_CRATE_NAME=viewer" in lines
    assert "WEBPUB_DESTINATION_DIR=/srv/site" in lines
    assert not any(line.startswith("WEBPUB_GIT_BIN") for line in lines)


def test_user_config_dir_honours_xdg(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module.sys, "platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert config_module.get_user_config_dir() == Path(tmp_path) / "webpub"
