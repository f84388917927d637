from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any

import yaml


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class AppConfig:
    name: str
    site_name: str


@dataclass(frozen=True)
class ApiConfig:
    base_url: str
    internal_base_url: str
    user_agent: str


@dataclass(frozen=True)
class LandingConfig:
    community_shortcuts: list[str]


@dataclass(frozen=True)
class Config:
    app: AppConfig
    api: ApiConfig
    landing: LandingConfig


DEFAULT_CONFIG: dict[str, Any] = {
    "app": {
        "name": "Newsdesk",
        "site_name": "Newsdesk",
    },
    "api": {
        "base_url": "http://localhost:8536",
        "internal_base_url": "http://localhost:8536",
        "user_agent": "Newsdesk/0.1",
    },
    "landing": {
        "community_shortcuts": [
            "news",
            "gallery",
            "tech",
            "talks",
            "club",
            "blogs",
        ],
    },
}

CONFIG_PATH_ENV = "NEWSDESK_CONFIG_PATH"

ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "NEWSDESK_API_BASE_URL": ("api", "base_url"),
    "NEWSDESK_API_INTERNAL_URL": ("api", "internal_base_url"),
    "NEWSDESK_SITE_NAME": ("app", "site_name"),
}


def load_config(path: str | None = None) -> Config:
    path = path or os.environ.get(CONFIG_PATH_ENV)
    raw: dict[str, Any] = {}
    if path:
        if not os.path.exists(path):
            raise ConfigError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as handle:
            try:
                loaded = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError("config must be a mapping")
        raw = loaded
    cfg = _merge(_deep_copy(DEFAULT_CONFIG), raw)
    _apply_env_overrides(cfg)
    errors = validate_config(cfg)
    if errors:
        raise ConfigError("Invalid config: " + "; ".join(errors))
    return _build_config(cfg)


def validate_config(cfg: dict[str, Any]) -> list[str]:
    errors: list[str] = []
    _validate_dict(cfg, DEFAULT_CONFIG, "config", errors)
    return errors


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(base[key], value)
        else:
            base[key] = value
    return base


def _apply_env_overrides(cfg: dict[str, Any]) -> None:
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        target = cfg.get(section)
        if isinstance(target, dict):
            target[key] = value


def _validate_dict(value: dict[str, Any], schema: dict[str, Any], path: str, errors: list[str]) -> None:
    if not isinstance(value, dict):
        errors.append(f"{path} must be an object")
        return
    for key in schema.keys():
        if key not in value:
            errors.append(f"missing {path}.{key}")
    for key in value.keys():
        if key not in schema:
            errors.append(f"unknown {path}.{key}")
    for key, default in schema.items():
        if key not in value:
            continue
        _validate_value(value[key], default, f"{path}.{key}", errors)


def _validate_value(value: Any, default: Any, path: str, errors: list[str]) -> None:
    if isinstance(default, dict):
        if not isinstance(value, dict):
            errors.append(f"{path} must be an object")
            return
        _validate_dict(value, default, path, errors)
        return
    if isinstance(default, list):
        if not isinstance(value, list):
            errors.append(f"{path} must be a list")
            return
        for item in value:
            if not isinstance(item, str):
                errors.append(f"{path} must be a list of strings")
                break
        return
    if isinstance(default, str):
        if not isinstance(value, str):
            errors.append(f"{path} must be a string")
        return


def _build_config(cfg: dict[str, Any]) -> Config:
    app_cfg = cfg.get("app") or {}
    api_cfg = cfg.get("api") or {}
    landing_cfg = cfg.get("landing") or {}

    app = AppConfig(
        name=str(app_cfg.get("name")),
        site_name=str(app_cfg.get("site_name")),
    )

    base_url = str(api_cfg.get("base_url")).rstrip("/")
    api = ApiConfig(
        base_url=base_url,
        internal_base_url=str(api_cfg.get("internal_base_url") or base_url).rstrip("/"),
        user_agent=str(api_cfg.get("user_agent")),
    )

    landing = LandingConfig(
        community_shortcuts=[
            str(item).strip().lower()
            for item in landing_cfg.get("community_shortcuts") or []
            if str(item).strip()
        ],
    )

    return Config(app=app, api=api, landing=landing)


def _deep_copy(value: dict[str, Any]) -> dict[str, Any]:
    return json.loads(json.dumps(value))
