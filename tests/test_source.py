from __future__ import annotations

import json

import pytest

from massrecall_installer.lib.manifests import Manifest, load_manifest
from massrecall_installer.lib.source import (
    AcquisitionMode,
    UserChoice,
    find_local_archives,
    resolve_mode,
)

FULL = Manifest(packages=("https://dl.example/a.zip",))


@pytest.mark.parametrize(
    "online,manifest,choice,expected",
    [
        (True, FULL, UserChoice.DOWNLOAD, AcquisitionMode.AUTO_DOWNLOAD),
        (True, None, UserChoice.DOWNLOAD, AcquisitionMode.MANUAL_PROMPT),
        (True, Manifest(), UserChoice.DOWNLOAD, AcquisitionMode.MANUAL_PROMPT),
        (True, FULL, UserChoice.SKIP, AcquisitionMode.LOCAL_SCAN),
        (False, FULL, UserChoice.DOWNLOAD, AcquisitionMode.LOCAL_SCAN),
        (False, None, UserChoice.SKIP, AcquisitionMode.LOCAL_SCAN),
    ],
)
def test_resolve_mode(online, manifest, choice, expected):
    assert resolve_mode(online=online, manifest=manifest, choice=choice) is expected


def test_find_local_archives_top_level_only(tmp_path):
    (tmp_path / "b.ZIP").write_bytes(b"z")
    (tmp_path / "a.zip").write_bytes(b"z")
    (tmp_path / "notes.txt").write_bytes(b"t")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "c.zip").write_bytes(b"z")

    assert [p.name for p in find_local_archives(tmp_path)] == ["a.zip", "b.ZIP"]


def test_find_local_archives_missing_dir(tmp_path):
    assert find_local_archives(tmp_path / "nope") == []


def test_manifest_json(tmp_path):
    p = tmp_path / "packages.json"
    p.write_text(json.dumps({"Packages": ["https://x/a.zip", "https://x/a.zip"], "extra": 1}))

    m = load_manifest(p)

    assert m is not None
    assert m.packages == ("https://x/a.zip", "https://x/a.zip")


def test_manifest_yaml(tmp_path):
    p = tmp_path / "packages.yaml"
    p.write_text("packages:\n  - https://x/a.zip\n  - https://x/b.zip\n")

    assert load_manifest(p) == Manifest(packages=("https://x/a.zip", "https://x/b.zip"))


def test_manifest_without_packages_is_empty(tmp_path):
    p = tmp_path / "packages.json"
    p.write_text("{}")

    m = load_manifest(p)

    assert m == Manifest()
    assert not m


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"packages": "https://x/a.zip"}'])
def test_malformed_manifest_degrades_to_absent(tmp_path, content):
    p = tmp_path / "packages.json"
    p.write_text(content)

    assert load_manifest(p) is None


def test_missing_manifest_is_absent(tmp_path):
    assert load_manifest(tmp_path / "packages.json") is None
