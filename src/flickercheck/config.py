from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from flickercheck.core.components import get_component
from flickercheck.core.constants import ALL_TRANSITIONS_KEY, RULE_CONFIG_SCHEMA_VERSION
from flickercheck.core.errors import RuleConfigurationError
from flickercheck.core.rule_config import RuleConfig
from flickercheck.core.rules import AssertionRule
from flickercheck.core.transition import is_valid_transition_type

_MAX_EXTENDS_DEPTH = 10
_RULE_KEYS = {"check", "component", "name"}


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise RuleConfigurationError(f"Rule config is not valid UTF-8: {path}: {exc.reason}") from exc
    except OSError as exc:
        raise RuleConfigurationError(f"Rule config could not be read: {path}: {exc}") from exc
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuleConfigurationError(f"Rule config is not valid YAML: {path}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise RuleConfigurationError(f"Rule config file must be a mapping: {path}")
    return loaded


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deterministic deep-merge: dicts merge recursively, lists/scalars override."""
    merged = dict(base)
    for key in sorted(overlay):
        val = overlay[key]
        if key in merged and isinstance(merged[key], dict) and isinstance(val, dict):
            merged[key] = deep_merge(merged[key], val)
        else:
            merged[key] = val
    return merged


def _resolve_extends(data: dict[str, Any], source_path: Path, depth: int = 0) -> dict[str, Any]:
    """Recursively resolve `extends` chains with cycle detection."""
    extends_raw = data.pop("extends", None)
    if extends_raw is None:
        return data
    if depth >= _MAX_EXTENDS_DEPTH:
        raise RuleConfigurationError(f"Rule config extends depth exceeded {_MAX_EXTENDS_DEPTH}: circular reference?")
    if not isinstance(extends_raw, str) or not extends_raw.strip():
        raise RuleConfigurationError(f"extends must be a non-empty string in {source_path}")

    extends_path = Path(extends_raw)
    if not extends_path.is_absolute():
        extends_path = (source_path.parent / extends_path).resolve()
    if not extends_path.exists():
        raise RuleConfigurationError(f"extends target not found: {extends_path}")

    base_data = _load_yaml(extends_path)
    base_data = _resolve_extends(base_data, extends_path, depth + 1)
    return deep_merge(base_data, data)


def _parse_rule(raw: Any, *, path: str) -> AssertionRule:
    if isinstance(raw, str):
        raw = {"check": raw}
    if not isinstance(raw, dict):
        raise RuleConfigurationError(f"{path} must be a check name or a mapping")

    unknown = sorted(set(raw) - _RULE_KEYS)
    if unknown:
        raise RuleConfigurationError(f"{path} has unknown keys: {', '.join(unknown)}")

    check = raw.get("check")
    if not isinstance(check, str) or not check.strip():
        raise RuleConfigurationError(f"{path}.check must be a non-empty string")

    component_raw = raw.get("component")
    if component_raw is not None and not isinstance(component_raw, str):
        raise RuleConfigurationError(f"{path}.component must be a string")

    name_raw = raw.get("name")
    if name_raw is not None and (not isinstance(name_raw, str) or not name_raw.strip()):
        raise RuleConfigurationError(f"{path}.name must be a non-empty string")

    try:
        component = get_component(component_raw.strip()) if component_raw is not None else None
        return AssertionRule(
            check=check.strip(),
            component=component,
            name=name_raw.strip() if name_raw is not None else None,
        )
    except RuleConfigurationError as exc:
        raise type(exc)(f"{path}: {exc}") from exc


def parse_rule_config(data: dict[str, Any], *, source_path: Path | None = None) -> RuleConfig:
    schema_version_raw = data.get("schema_version", RULE_CONFIG_SCHEMA_VERSION)
    schema_version = str(schema_version_raw).strip()
    if schema_version != RULE_CONFIG_SCHEMA_VERSION:
        raise RuleConfigurationError(
            f"Unsupported rule config schema_version: {schema_version}. Supported: {RULE_CONFIG_SCHEMA_VERSION}"
        )

    transitions_raw = data.get("transitions")
    if transitions_raw is None:
        transitions_raw = {}
    if not isinstance(transitions_raw, dict):
        raise RuleConfigurationError("transitions must be a mapping of transition type to rule list")

    rules_by_type: dict[str, tuple[AssertionRule, ...]] = {}
    for key, rules_raw in transitions_raw.items():
        transition_type = str(key).strip()
        if transition_type != ALL_TRANSITIONS_KEY and not is_valid_transition_type(transition_type):
            raise RuleConfigurationError(f"transitions.{transition_type} is not a supported transition type")
        if rules_raw is None:
            rules_raw = []
        if not isinstance(rules_raw, list):
            raise RuleConfigurationError(f"transitions.{transition_type} must be a list")
        rules_by_type[transition_type] = tuple(
            _parse_rule(rule_raw, path=f"transitions.{transition_type}[{index}]")
            for index, rule_raw in enumerate(rules_raw)
        )

    return RuleConfig(
        rules_by_type=rules_by_type,
        source_path=str(source_path) if source_path is not None else None,
    )


def load_rule_config(path: Path) -> RuleConfig:
    data = _load_yaml(path)
    data = _resolve_extends(data, path.resolve())
    return parse_rule_config(data, source_path=path.resolve())


__all__ = [
    "deep_merge",
    "load_rule_config",
    "parse_rule_config",
]
