"""SEO module initialization"""

from surf_retreats.seo.sitemap import (
    ChangeFrequency,
    SitemapEntry,
    RobotsRule,
    RobotsRules,
    build_sitemap,
    render_sitemap_xml,
    build_robots,
    render_robots_txt,
)

__all__ = [
    "ChangeFrequency",
    "SitemapEntry",
    "RobotsRule",
    "RobotsRules",
    "build_sitemap",
    "render_sitemap_xml",
    "build_robots",
    "render_robots_txt",
]
