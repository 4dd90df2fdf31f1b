"""Load and validate site configuration YAML for knowledge-base builds.

This subpackage parses the optional ``config/site.yaml`` file and produces
slotted dataclasses (:class:`SiteConfig`, :class:`NavLinkConfig`,
:class:`LiveSiteConfig`) holding the branding, navigation links, and live-site
settings shared by every generated page and the review tooling.

Examples
--------
>>> from pathlib import Path
>>> from kb_pages.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.live_site.path_prefix  # doctest: +SKIP
'/cascadecms/latest/'
"""

from .loader import load_site_config
from .models import LiveSiteConfig, NavLinkConfig, SiteConfig, SiteConfigError

__all__ = [
    "LiveSiteConfig",
    "NavLinkConfig",
    "SiteConfig",
    "SiteConfigError",
    "load_site_config",
]
