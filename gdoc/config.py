"""Configuration loading for gdoc (.gdoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".gdoc.yml"
THEMES = ("light", "dark")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class RenderConfig:
    """Presentation settings for the generated document."""

    package_separator: str = "/"
    toc: bool = True
    include_readme: bool = True
    include_index: bool = True
    strict_anchors: bool = False
    theme: Optional[str] = "light"
    templates_dir: Optional[Path] = None


@dataclass
class BuilderConfig:
    """Model construction settings."""

    constructor_prefixes: List[str] = field(default_factory=lambda: ["New"])


@dataclass
class ResolveConfig:
    """Symbol resolution settings."""

    workers: int = 1


@dataclass
class LinkConfig:
    """Comment cross-linking settings."""

    enabled: bool = True


@dataclass
class GdocConfig:
    """Represents the high-level settings defined in .gdoc.yml."""

    root: Path
    module: Optional[str] = None
    packages: List[str] = field(default_factory=list)
    analyzer: str = "dump"
    output: Optional[Path] = None
    render: RenderConfig = field(default_factory=RenderConfig)
    builder: BuilderConfig = field(default_factory=BuilderConfig)
    resolve: ResolveConfig = field(default_factory=ResolveConfig)
    links: LinkConfig = field(default_factory=LinkConfig)


def load_config(config_path: Path) -> GdocConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GdocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    render_data = _as_dict(data.get("render"))
    render = RenderConfig()
    if render_data:
        separator = _as_str(render_data.get("package_separator"))
        if separator is not None:
            if not separator:
                raise ConfigError("render.package_separator must not be empty")
            render.package_separator = separator
        render.toc = _bool_or(render_data.get("toc"), render.toc)
        render.include_readme = _bool_or(render_data.get("include_readme"), render.include_readme)
        render.include_index = _bool_or(render_data.get("include_index"), render.include_index)
        render.strict_anchors = _bool_or(render_data.get("strict_anchors"), render.strict_anchors)
        if "theme" in render_data:
            render.theme = _as_theme(render_data.get("theme"))
        templates_dir = _as_str(render_data.get("templates_dir"))
        if templates_dir:
            render.templates_dir = root / templates_dir

    builder = BuilderConfig()
    builder_data = _as_dict(data.get("builder"))
    if builder_data and "constructor_prefixes" in builder_data:
        prefixes = _as_str_list(builder_data.get("constructor_prefixes"))
        if not prefixes:
            raise ConfigError("builder.constructor_prefixes must list at least one prefix")
        builder.constructor_prefixes = prefixes

    resolve = ResolveConfig()
    resolve_data = _as_dict(data.get("resolve"))
    if resolve_data and "workers" in resolve_data:
        workers = _as_int(resolve_data.get("workers"))
        if workers is None or workers < 1:
            raise ConfigError("resolve.workers must be a positive integer")
        resolve.workers = workers

    links = LinkConfig()
    links_data = _as_dict(data.get("links"))
    if links_data:
        links.enabled = _bool_or(links_data.get("enabled"), links.enabled)

    output_str = _as_str(data.get("output"))

    return GdocConfig(
        root=root,
        module=_as_str(data.get("module")),
        packages=_as_str_list(data.get("packages")),
        analyzer=_as_str(data.get("analyzer")) or "dump",
        output=root / output_str if output_str else None,
        render=render,
        builder=builder,
        resolve=resolve,
        links=links,
    )


def split_packages(value: Optional[str]) -> List[str]:
    """Split a ``a;b;c`` package selection, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(";") if part.strip()]


def _as_theme(value: Any) -> Optional[str]:
    if value is None or value is False:
        return None
    theme = (_as_str(value) or "").strip().lower()
    if theme == "none":
        return None
    if theme not in THEMES:
        raise ConfigError(f"render.theme must be one of {', '.join(THEMES)} or none")
    return theme


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _bool_or(value: Any, default: bool) -> bool:
    parsed = _as_bool(value)
    return default if parsed is None else parsed


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return split_packages(value)
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "BuilderConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "GdocConfig",
    "LinkConfig",
    "RenderConfig",
    "ResolveConfig",
    "THEMES",
    "load_config",
    "split_packages",
]
