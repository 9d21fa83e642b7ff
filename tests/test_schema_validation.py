from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from parley.paths import get_paths
from parley.services.content import ContentError, ContentService


def test_paths_point_at_packaged_content() -> None:
    paths = get_paths()
    assert paths.data_dir.name == "data"
    assert paths.data_dir.parent.name == "parley"
    assert paths.schema_dir == paths.data_dir / "schemas"
    for name in ("difficulties", "npcs", "intel_names"):
        assert (paths.data_dir / f"{name}.json").is_file()
        assert (paths.schema_dir / f"{name}.schema.json").is_file()


def test_content_schemas_validate() -> None:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    content.validate_all()


def test_shipped_difficulties() -> None:
    paths = get_paths()
    profiles = ContentService(paths.data_dir, paths.schema_dir).load_difficulties()
    assert set(profiles) == {"easy", "hard"}
    assert (profiles["easy"].bad_intel_count, profiles["easy"].good300_count, profiles["easy"].good100_count) == (1, 2, 1)
    assert (profiles["hard"].bad_intel_count, profiles["hard"].good300_count, profiles["hard"].good100_count) == (3, 2, 1)


def _copy_data(tmp_path: Path) -> Path:
    paths = get_paths()
    data_dir = tmp_path / "data"
    shutil.copytree(paths.data_dir, data_dir)
    return data_dir


def test_invalid_content_is_reported(tmp_path: Path) -> None:
    data_dir = _copy_data(tmp_path)
    (data_dir / "difficulties.json").write_text(
        json.dumps({"difficulties": [{"id": "easy", "bad_intel_count": -1}]}), encoding="utf-8"
    )
    content = ContentService(data_dir, data_dir / "schemas")
    with pytest.raises(ContentError) as exc:
        content.load_difficulties()
    assert "Schema validation failed" in str(exc.value)


def test_missing_content_file(tmp_path: Path) -> None:
    data_dir = _copy_data(tmp_path)
    (data_dir / "npcs.json").unlink()
    content = ContentService(data_dir, data_dir / "schemas")
    with pytest.raises(ContentError):
        content.load_npc_pool()


def test_duplicate_npc_names_rejected(tmp_path: Path) -> None:
    data_dir = _copy_data(tmp_path)
    (data_dir / "npcs.json").write_text(
        json.dumps({"npcs": [{"name": "A", "role": "x"}, {"name": "A", "role": "y"}]}),
        encoding="utf-8",
    )
    content = ContentService(data_dir, data_dir / "schemas")
    with pytest.raises(ContentError):
        content.load_npc_pool()
