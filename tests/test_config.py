from __future__ import annotations

from pathlib import Path

import pytest

from massrecall_installer.errors import NoInputError
from massrecall_installer.install_config import InstallConfig, load_install_config
from massrecall_installer.lib.download import DownloadPolicy
from massrecall_installer.lib.source import UserChoice
from massrecall_installer.prompts import ConsolePrompt
from massrecall_installer.state_store import load_state, save_state


def test_defaults_without_config_file():
    cfg = load_install_config(None)

    assert cfg.work_dir == "."
    assert cfg.manifest_path == str(Path(".") / "packages.json")
    assert cfg.install_root is None
    assert cfg.download_policy == DownloadPolicy()


def test_yaml_config_values(tmp_path):
    p = tmp_path / "install_config.yaml"
    p.write_text(
        "paths:\n"
        "  work_dir: /srv/pkgs\n"
        "download:\n"
        "  choice: Skip\n"
        "  max_retries: 4\n"
        "  retry_delay_s: 0.5\n"
    )

    cfg = load_install_config(str(p))

    assert cfg.manifest_path == str(Path("/srv/pkgs") / "packages.json")
    assert cfg.download_choice == "skip"
    assert cfg.download_policy.max_retries == 4
    assert cfg.download_policy.retry_delay == 0.5
    assert cfg.download_policy.attempt_timeout == DownloadPolicy().attempt_timeout


def test_cli_overrides_layer_over_file():
    cfg = InstallConfig(raw={"paths": {"work_dir": "a", "install_root": "/games/sc2"}})

    merged = cfg.with_overrides(work_dir="b", install_root=None, manifest="m.json")

    assert merged.work_dir == "b"
    assert merged.install_root == "/games/sc2"
    assert merged.manifest_path == "m.json"
    assert cfg.work_dir == "a"


def test_missing_config_file_is_an_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_install_config(str(tmp_path / "nope.yaml"))


def test_config_must_be_yaml_mapping(tmp_path):
    p = tmp_path / "install_config.yaml"
    p.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        load_install_config(str(p))


@pytest.mark.parametrize("name", ["state.json", "state.yaml"])
def test_state_round_trips_by_extension(tmp_path, name):
    path = str(tmp_path / "nested" / name)
    save_state(path, {"execution": {"completed_steps": ["10_prepare_target"]}})

    assert load_state(path) == {"execution": {"completed_steps": ["10_prepare_target"]}}


def test_console_prompt_repeats_until_valid_answer(tmp_path):
    answers = iter(["x", "", " B "])
    prompt = ConsolePrompt(read=lambda msg: next(answers), open_page=lambda url: True)

    assert prompt.choose_download() is UserChoice.SKIP


def test_console_prompt_manual_placement_opens_page(tmp_path):
    opened = []
    prompt = ConsolePrompt(read=lambda msg: "", open_page=lambda url: opened.append(url) or True)

    prompt.wait_for_manual_placement(tmp_path, "https://example.org/page")

    assert opened == ["https://example.org/page"]


def _closed_stdin(msg):
    raise EOFError


def test_console_prompt_without_input_asks_for_cli_flag(tmp_path):
    prompt = ConsolePrompt(read=_closed_stdin, open_page=lambda url: True)

    with pytest.raises(NoInputError, match="--skip-download") as info:
        prompt.choose_download()
    assert info.value.exit_code == 7

    with pytest.raises(NoInputError):
        prompt.wait_for_manual_placement(tmp_path, "https://example.org/page")
