"""Configuration helpers for the page tree CLI."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError


class SiteSettings(BaseModel):
    """Description of the site whose pages are loaded."""

    name: str = Field("Site", description="Display name of the site")
    handle: Optional[str] = Field(None, description="Machine-readable identifier of the site")
    locales: list[str] = Field(
        default_factory=lambda: ["en"],
        description="Locales of the site, the first one being the default locale",
    )
    pages_path: Path = Field(Path("pages"), description="Directory holding the page files")

    @field_validator("locales")
    @classmethod
    def _require_locales(cls, value: list[str]) -> list[str]:
        locales = [locale.strip() for locale in value if locale and locale.strip()]
        if not locales:
            raise ValueError("at least one locale is required")
        return locales


class PageDefaults(BaseModel):
    """Attribute values applied to imported pages which do not set them."""

    listed: bool = True
    published: bool = True
    searchable: bool = True
    cache_strategy: str = Field("none", description="Cache strategy, 'none' disables caching")
    response_type: str = Field("text/html", description="MIME type of the rendered page")


class PageTreeConfig(BaseModel):
    """Aggregate configuration for the CLI."""

    site: SiteSettings = Field(default_factory=SiteSettings)
    defaults: PageDefaults = Field(default_factory=PageDefaults)


ENV_PREFIX = "PAGETREE"
DEFAULT_CONFIG_PATHS = (
    Path.cwd() / "pagetree.toml",
    Path.home() / ".config" / "pagetree" / "config.toml",
)


@dataclasses.dataclass
class ConfigSource:
    """Result of attempting to resolve configuration data."""

    config: Optional[PageTreeConfig]
    path: Optional[Path]
    error: Optional[Exception]


def _load_from_env() -> dict[str, object]:
    """Return a dictionary with configuration values extracted from environment variables."""

    def _get(name: str) -> Optional[str]:
        return os.getenv(f"{ENV_PREFIX}_{name}")

    site: dict[str, object] = {}
    for key, name in (("SITE_NAME", "name"), ("SITE_HANDLE", "handle"), ("PAGES_PATH", "pages_path")):
        value = _get(key)
        if value:
            site[name] = value

    locales = _get("LOCALES")
    if locales:
        site["locales"] = locales.split(",")

    if not site:
        return {}
    return {"site": site}


def _load_toml(path: Path) -> Optional[dict]:
    if not path.exists():
        return None

    try:  # Python 3.11+
        import tomllib  # type: ignore
    except ModuleNotFoundError:  # pragma: no cover - Python <3.11 fallback
        import tomli as tomllib  # type: ignore

    with path.open("rb") as handle:
        return tomllib.load(handle)


def resolve_config(explicit_path: Optional[Path] = None) -> ConfigSource:
    """Discover configuration using the first available source.

    The priority order is:
    1. Explicit path provided via CLI argument.
    2. Default configuration files in the working directory or the user's config directory.
    3. Environment variables with the `PAGETREE_` prefix.
    """

    errors: list[Exception] = []
    sources: list[tuple[Optional[Path], Optional[dict]]] = []

    if explicit_path:
        try:
            data = _load_toml(explicit_path)
        except Exception as exc:  # pragma: no cover - configuration loading failure path
            errors.append(exc)
        else:
            if data is None:
                errors.append(FileNotFoundError(f"Configuration file {explicit_path} does not exist"))
            else:
                sources.append((explicit_path, data))

    if not sources and not errors:
        for path in DEFAULT_CONFIG_PATHS:
            try:
                data = _load_toml(path)
            except Exception as exc:  # pragma: no cover
                errors.append(exc)
                continue
            if data is not None:
                sources.append((path, data))
                break

    if not sources and not errors:
        env_data = _load_from_env()
        if env_data:
            sources.append((None, env_data))

    for path, data in sources:
        if data is None:
            continue
        try:
            config = PageTreeConfig.model_validate(data)
            return ConfigSource(config=config, path=path, error=None)
        except ValidationError as exc:
            errors.append(exc)

    error = errors[0] if errors else None
    return ConfigSource(config=None, path=None, error=error)


def ensure_config(
    *,
    pages_path: Optional[Path] = None,
    locales: Optional[list[str]] = None,
    site_name: Optional[str] = None,
    config_path: Optional[Path] = None,
) -> PageTreeConfig:
    """Resolve configuration from precedence order and apply explicit CLI options on top."""

    source = resolve_config(config_path)

    if source.error is not None:
        raise ConfigError(f"Invalid configuration: {source.error}")

    if source.config:
        config = source.config.model_copy(deep=True)
    else:
        config = PageTreeConfig()

    if pages_path:
        config.site.pages_path = pages_path
    if locales:
        config.site.locales = SiteSettings(locales=locales).locales
    if site_name:
        config.site.name = site_name

    return config
