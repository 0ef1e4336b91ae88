from __future__ import annotations

import zipfile
from datetime import datetime

import pytest

from massrecall_installer.errors import ExtractionError
from massrecall_installer.lib.archives import extract_each, make_staging_root


def test_each_archive_gets_its_own_subtree(tmp_path, make_zip):
    a = make_zip(tmp_path / "Core.zip", {"Starcraft Mass Recall/a.txt": b"a"})
    b = make_zip(tmp_path / "Extras.zip", {"Starcraft Mass Recall/a.txt": b"b"})

    staged = extract_each([a, b], tmp_path / "stage")

    assert [p.name for p in staged] == ["Core", "Extras"]
    assert (staged[0] / "Starcraft Mass Recall" / "a.txt").read_bytes() == b"a"
    assert (staged[1] / "Starcraft Mass Recall" / "a.txt").read_bytes() == b"b"


def test_extraction_overwrites_existing_files(tmp_path, make_zip):
    archive = make_zip(tmp_path / "Core.zip", {"x.txt": b"fresh"})
    stale = tmp_path / "stage" / "Core" / "x.txt"
    stale.parent.mkdir(parents=True)
    stale.write_bytes(b"stale")

    extract_each([archive], tmp_path / "stage")

    assert stale.read_bytes() == b"fresh"


def test_extraction_leaves_archive_in_place(tmp_path, make_zip):
    archive = make_zip(tmp_path / "Core.zip", {"x.txt": b"x"})
    before = archive.read_bytes()

    extract_each([archive], tmp_path / "stage")

    assert archive.read_bytes() == before


def test_corrupt_archive_is_fatal_and_named(tmp_path, make_zip):
    good = make_zip(tmp_path / "Good.zip", {"x.txt": b"x"})
    bad = tmp_path / "Broken.zip"
    bad.write_bytes(b"this is not a zip")

    with pytest.raises(ExtractionError) as info:
        extract_each([good, bad], tmp_path / "stage")

    assert info.value.archive == "Broken.zip"
    assert "Broken.zip" in str(info.value)
    assert info.value.exit_code == 4


def test_member_escaping_subtree_is_rejected(tmp_path):
    evil = tmp_path / "Evil.zip"
    with zipfile.ZipFile(evil, "w") as zf:
        zf.writestr("../../outside.txt", b"nope")

    with pytest.raises(ExtractionError, match="escapes"):
        extract_each([evil], tmp_path / "stage")

    assert not (tmp_path / "outside.txt").exists()


def test_make_staging_root_is_timestamped(tmp_path):
    root = make_staging_root(tmp_path, now=datetime(2024, 5, 6, 7, 8, 9))

    assert root == tmp_path / "_extract_20240506_070809"
    assert root.is_dir()
