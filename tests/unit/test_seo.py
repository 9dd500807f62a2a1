"""
Sitemap and robots.txt Unit Tests
"""

from datetime import datetime, timezone

import pytest
from lxml import etree

from surf_retreats.seo import (
    ChangeFrequency,
    build_sitemap,
    render_sitemap_xml,
    build_robots,
    render_robots_txt,
)
from surf_retreats.seo.sitemap import SITEMAP_NS

NOW = datetime(2026, 10, 17, 8, 30, tzinfo=timezone.utc)


class TestSitemap:
    """Tests for sitemap generation"""

    @pytest.fixture
    def entries(self):
        return build_sitemap("https://rainbowsurfretreats.com/", ["bali-2027", "portugal-spring"], NOW)

    def test_static_pages_first(self, entries):
        urls = [e.url for e in entries]
        assert urls[:6] == [
            "https://rainbowsurfretreats.com",
            "https://rainbowsurfretreats.com/about",
            "https://rainbowsurfretreats.com/contact",
            "https://rainbowsurfretreats.com/blog",
            "https://rainbowsurfretreats.com/policies",
            "https://rainbowsurfretreats.com/privacy-policy",
        ]

    def test_retreat_entries(self, entries):
        retreat = entries[6]
        assert retreat.url == "https://rainbowsurfretreats.com/retreats/bali-2027"
        assert retreat.change_frequency == ChangeFrequency.WEEKLY
        assert retreat.priority == 0.9
        assert len(entries) == 8

    def test_home_priority(self, entries):
        assert entries[0].priority == 1.0
        assert entries[0].change_frequency == ChangeFrequency.WEEKLY

    def test_shared_lastmod(self, entries):
        assert {e.last_modified for e in entries} == {NOW}

    def test_no_retreats(self):
        assert len(build_sitemap("https://example.com", [], NOW)) == 6

    def test_render_xml(self, entries):
        document = render_sitemap_xml(entries)
        root = etree.fromstring(document)

        assert root.tag == f"{{{SITEMAP_NS}}}urlset"
        urls = root.findall(f"{{{SITEMAP_NS}}}url")
        assert len(urls) == 8
        first = urls[0]
        assert first.findtext(f"{{{SITEMAP_NS}}}loc") == "https://rainbowsurfretreats.com"
        assert first.findtext(f"{{{SITEMAP_NS}}}lastmod") == "2026-10-17T08:30:00+00:00"
        assert first.findtext(f"{{{SITEMAP_NS}}}changefreq") == "weekly"
        assert first.findtext(f"{{{SITEMAP_NS}}}priority") == "1.0"
        assert urls[6].findtext(f"{{{SITEMAP_NS}}}priority") == "0.9"


class TestRobots:
    """Tests for robots.txt"""

    def test_rules(self):
        robots = build_robots("https://example.com/")
        assert robots.sitemap == "https://example.com/sitemap.xml"
        assert robots.rules[0].disallow == ["/admin/", "/login", "/booking"]

    def test_render(self):
        text = render_robots_txt(build_robots("https://example.com"))
        assert text == (
            "User-Agent: *\n"
            "Allow: /\n"
            "Disallow: /admin/\n"
            "Disallow: /login\n"
            "Disallow: /booking\n"
            "\n"
            "Sitemap: https://example.com/sitemap.xml\n"
        )
