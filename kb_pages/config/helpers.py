"""Utility helpers shared by the site configuration loader."""

from __future__ import annotations

import typing as typ

from .models import LiveSiteConfig, NavLinkConfig, SiteConfigError


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _build_links(raw: object, *, field: str) -> list[NavLinkConfig]:
    """Build link configs from a YAML list of ``{label, href}`` mappings."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        msg = f"'{field}' must be a list of links."
        raise SiteConfigError(msg)
    links: list[NavLinkConfig] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            msg = f"'{field}[{index}]' must be a mapping with label and href."
            raise SiteConfigError(msg)
        label = _optional_str(entry.get("label"))
        href = _optional_str(entry.get("href"))
        if not label or not href:
            msg = f"'{field}[{index}]' requires both 'label' and 'href'."
            raise SiteConfigError(msg)
        links.append(
            NavLinkConfig(label=label, href=href, active=bool(entry.get("active")))
        )
    return links


def _build_live_site(payload: typ.Mapping[str, typ.Any] | None) -> LiveSiteConfig:
    """Build the live-site config, normalizing the path prefix slashes."""
    base = LiveSiteConfig()
    if not payload:
        return base
    prefix = _optional_str(payload.get("path_prefix")) or base.path_prefix
    prefix = "/" + prefix.strip("/") + "/" if prefix.strip("/") else "/"
    return LiveSiteConfig(path_prefix=prefix)


__all__ = ["_build_links", "_build_live_site", "_optional_str"]
