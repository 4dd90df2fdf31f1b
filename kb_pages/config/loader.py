"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ

from ruamel.yaml import YAML

from kb_pages._constants import DEFAULT_SITE_CONFIG

from .helpers import _build_links, _build_live_site, _optional_str
from .models import SiteConfig, SiteConfigError

if typ.TYPE_CHECKING:
    from pathlib import Path


def load_site_config(path: Path | None = None) -> SiteConfig:
    """Load the YAML configuration describing site branding and navigation.

    Parameters
    ----------
    path : Path or None, optional
        Filesystem path to the YAML file. When ``None`` the default
        ``config/site.yaml`` is used if present, otherwise built-in defaults.

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied for missing keys.

    Raises
    ------
    FileNotFoundError
        If an explicitly requested configuration file does not exist.
    SiteConfigError
        If the top-level YAML structure is not a mapping or a link entry is
        malformed.

    Examples
    --------
    >>> from kb_pages.config import load_site_config
    >>> load_site_config().title  # doctest: +SKIP
    'Knowledge Base'
    """
    if path is None:
        if not DEFAULT_SITE_CONFIG.exists():
            return SiteConfig()
        path = DEFAULT_SITE_CONFIG
    elif not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    return _build_site_config(loaded)


def _build_site_config(raw: typ.Mapping[str, typ.Any]) -> SiteConfig:
    """Merge the raw mapping over the dataclass defaults."""
    base = SiteConfig()
    logo = _section(raw, "logo")
    footer = _section(raw, "footer")
    header_links = raw.get("header_links")
    return SiteConfig(
        title=_optional_str(raw.get("title")) or base.title,
        logo_primary=_optional_str(logo.get("primary")) or base.logo_primary,
        logo_secondary=_optional_str(logo.get("secondary")) or base.logo_secondary,
        header_links=(
            _build_links(header_links, field="header_links")
            if header_links is not None
            else base.header_links
        ),
        footer_primary_links=_build_links(
            footer.get("primary_links"), field="footer.primary_links"
        ),
        footer_links=_build_links(footer.get("links"), field="footer.links"),
        copyright_holder=_optional_str(footer.get("copyright_holder")) or "",
        live_site=_build_live_site(_section(raw, "live_site")),
    )


def _section(raw: typ.Mapping[str, typ.Any], key: str) -> typ.Mapping[str, typ.Any]:
    """Return the nested mapping stored under ``key`` or an empty mapping."""
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        msg = f"'{key}' must be a mapping."
        raise SiteConfigError(msg)
    return value


__all__ = ["load_site_config"]
