from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from parley.engine.types import ContentBundle, DifficultyProfile, IntelNames, NPCDefinition


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _require_list(obj: Mapping[str, object], key: str) -> list[object]:
    v = obj.get(key)
    if not isinstance(v, list):
        raise ContentError(f"Expected list for {key}")
    return v


def _optional_int(obj: Mapping[str, object], key: str) -> int | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def _load_validated(self, name: str) -> Mapping[str, object]:
        path = self._data_dir / f"{name}.json"
        raw = _load_json(path)
        schema = _load_json(self._schema_dir / f"{name}.schema.json")
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError(f"{name}.json must be an object")
        return raw

    def load_difficulties(self) -> dict[str, DifficultyProfile]:
        raw = self._load_validated("difficulties")
        profiles: dict[str, DifficultyProfile] = {}
        for item in _require_list(raw, "difficulties"):
            if not isinstance(item, dict):
                continue
            profile = DifficultyProfile(
                id=_require_str(item, "id"),
                bad_intel_count=_require_int(item, "bad_intel_count"),
                good300_count=_require_int(item, "good300_count"),
                good100_count=_require_int(item, "good100_count"),
            )
            if profile.id in profiles:
                raise ContentError(f"Duplicate difficulty id: {profile.id}")
            profiles[profile.id] = profile
        return profiles

    def load_npc_pool(self) -> tuple[NPCDefinition, ...]:
        raw = self._load_validated("npcs")
        pool: list[NPCDefinition] = []
        seen: set[str] = set()
        for item in _require_list(raw, "npcs"):
            if not isinstance(item, dict):
                continue
            name = _require_str(item, "name")
            if name in seen:
                raise ContentError(f"Duplicate NPC name: {name}")
            seen.add(name)
            pool.append(
                NPCDefinition(
                    name=name,
                    role=_require_str(item, "role"),
                    base_rate=_optional_int(item, "base_rate"),
                )
            )
        return tuple(pool)

    def load_intel_names(self) -> IntelNames:
        raw = self._load_validated("intel_names")
        good: dict[int, tuple[str, ...]] = {}
        bad: dict[int, tuple[str, ...]] = {}
        for item in _require_list(raw, "topics"):
            if not isinstance(item, dict):
                continue
            topic = _require_int(item, "topic")
            good[topic] = tuple(n for n in _require_list(item, "good") if isinstance(n, str))
            bad[topic] = tuple(n for n in _require_list(item, "bad") if isinstance(n, str))
        return IntelNames(good=good, bad=bad)

    def load_bundle(self) -> ContentBundle:
        return ContentBundle(
            profiles=self.load_difficulties(),
            npc_pool=self.load_npc_pool(),
            names=self.load_intel_names(),
        )

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_bundle()
