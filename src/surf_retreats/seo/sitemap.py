"""
Sitemap and robots.txt generation

Static marketing pages come first, followed by one entry per published
retreat. All entries share the same ``lastmod`` so a sitemap rendered
in one request is internally consistent.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, List

from lxml import etree

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


class ChangeFrequency(str, Enum):
    """Allowed ``changefreq`` values"""
    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


@dataclass(frozen=True)
class SitemapEntry:
    """One ``<url>`` element"""
    url: str
    last_modified: datetime
    change_frequency: ChangeFrequency
    priority: float


# path, change frequency, priority
STATIC_PAGES = (
    ("", ChangeFrequency.WEEKLY, 1.0),
    ("/about", ChangeFrequency.MONTHLY, 0.8),
    ("/contact", ChangeFrequency.MONTHLY, 0.7),
    ("/blog", ChangeFrequency.WEEKLY, 0.8),
    ("/policies", ChangeFrequency.YEARLY, 0.3),
    ("/privacy-policy", ChangeFrequency.YEARLY, 0.3),
)

RETREAT_CHANGE_FREQUENCY = ChangeFrequency.WEEKLY
RETREAT_PRIORITY = 0.9


def build_sitemap(
    base_url: str,
    retreat_ids: Iterable[str],
    now: datetime,
) -> List[SitemapEntry]:
    """
    Build the sitemap entries for the site

    Args:
        base_url: Site origin, e.g. ``https://rainbowsurfretreats.com``
        retreat_ids: Identifiers of the retreats to list
        now: Timestamp used as ``lastmod`` for every entry

    Returns:
        Static pages followed by retreat pages
    """
    base_url = base_url.rstrip("/")

    entries = [
        SitemapEntry(f"{base_url}{path}", now, frequency, priority)
        for path, frequency, priority in STATIC_PAGES
    ]
    entries.extend(
        SitemapEntry(f"{base_url}/retreats/{retreat_id}", now, RETREAT_CHANGE_FREQUENCY, RETREAT_PRIORITY)
        for retreat_id in retreat_ids
    )
    return entries


def render_sitemap_xml(entries: Iterable[SitemapEntry]) -> bytes:
    """Serialize entries as a sitemaps.org ``urlset`` document"""
    urlset = etree.Element(f"{{{SITEMAP_NS}}}urlset", nsmap={None: SITEMAP_NS})

    for entry in entries:
        url = etree.SubElement(urlset, f"{{{SITEMAP_NS}}}url")
        etree.SubElement(url, f"{{{SITEMAP_NS}}}loc").text = entry.url
        etree.SubElement(url, f"{{{SITEMAP_NS}}}lastmod").text = entry.last_modified.isoformat()
        etree.SubElement(url, f"{{{SITEMAP_NS}}}changefreq").text = entry.change_frequency.value
        etree.SubElement(url, f"{{{SITEMAP_NS}}}priority").text = f"{entry.priority:.1f}"

    return etree.tostring(urlset, xml_declaration=True, encoding="UTF-8", pretty_print=True)


@dataclass(frozen=True)
class RobotsRule:
    user_agent: str = "*"
    allow: List[str] = field(default_factory=lambda: ["/"])
    disallow: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RobotsRules:
    rules: List[RobotsRule]
    sitemap: str


def build_robots(base_url: str) -> RobotsRules:
    """Crawling rules: keep admin, login and the booking funnel out of indexes"""
    base_url = base_url.rstrip("/")
    return RobotsRules(
        rules=[RobotsRule(user_agent="*", allow=["/"], disallow=["/admin/", "/login", "/booking"])],
        sitemap=f"{base_url}/sitemap.xml",
    )


def render_robots_txt(robots: RobotsRules) -> str:
    lines: List[str] = []
    for rule in robots.rules:
        lines.append(f"User-Agent: {rule.user_agent}")
        lines.extend(f"Allow: {path}" for path in rule.allow)
        lines.extend(f"Disallow: {path}" for path in rule.disallow)
        lines.append("")
    lines.append(f"Sitemap: {robots.sitemap}")
    return "\n".join(lines) + "\n"
