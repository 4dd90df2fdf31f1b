"""Typed dataclasses describing knowledge-base site configuration."""

from __future__ import annotations

import dataclasses as dc


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class NavLinkConfig:
    """A labelled hyperlink rendered in the header or footer."""

    label: str
    href: str
    active: bool = False


@dc.dataclass(slots=True)
class LiveSiteConfig:
    """Where the live knowledge base serves the pages being reconciled."""

    path_prefix: str = "/cascadecms/latest/"


def _default_header_links() -> list[NavLinkConfig]:
    return [
        NavLinkConfig(label="Knowledge Base", href="#", active=True),
        NavLinkConfig(label="Release Notes", href="#"),
        NavLinkConfig(label="Support", href="#"),
    ]


@dc.dataclass(slots=True)
class SiteConfig:
    """Branding and navigation shared by every generated page.

    Attributes
    ----------
    title : str
        Site title used for the home page heading and ``<title>`` suffix.
    logo_primary : str
        Emphasized part of the header logo.
    logo_secondary : str
        Remaining header logo text.
    header_links : list[NavLinkConfig]
        Top navigation links.
    footer_primary_links : list[NavLinkConfig]
        Prominent footer links.
    footer_links : list[NavLinkConfig]
        Secondary footer links.
    copyright_holder : str
        Name printed after the copyright year.
    live_site : LiveSiteConfig
        Settings for matching live-site URLs to generated pages.
    """

    title: str = "Knowledge Base"
    logo_primary: str = "Knowledge"
    logo_secondary: str = "Base Docs"
    header_links: list[NavLinkConfig] = dc.field(default_factory=_default_header_links)
    footer_primary_links: list[NavLinkConfig] = dc.field(default_factory=list)
    footer_links: list[NavLinkConfig] = dc.field(default_factory=list)
    copyright_holder: str = ""
    live_site: LiveSiteConfig = dc.field(default_factory=LiveSiteConfig)


__all__ = ["LiveSiteConfig", "NavLinkConfig", "SiteConfig", "SiteConfigError"]
