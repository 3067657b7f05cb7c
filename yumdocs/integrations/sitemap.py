import logging
import os
from dataclasses import dataclass
from urllib.parse import urlparse

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..date_helpers import date_to_xml_string
from ..errors import ConfigError
from ..routing import absolute_url, route_absolute_url
from . import Integration

logger = logging.getLogger(__name__)

SITEMAP_INDEX_FILE = "sitemap-index.xml"
SITEMAP_FILE = "sitemap-{}.xml"

# the sitemaps.org protocol allows at most 50,000 URLs per file
DEFAULT_ENTRY_LIMIT = 45000

TEMPLATES_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.realpath(__file__))), "templates"
)

CHANGEFREQ_VALUES = ["always", "hourly", "daily", "weekly", "monthly", "yearly", "never"]

XML_ENV = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["xml"]),
)
XML_ENV.filters["date_to_xml_string"] = date_to_xml_string


def is_sitemap_page(page) -> bool:
    """Only HTML pages that are not error pages belong in a sitemap."""
    if not page.output.endswith(".html"):
        return False

    if os.path.basename(page.output) == "404.html":
        return False

    return page.sitemap is not False


@dataclass(frozen=True)
class SitemapIntegration(Integration):
    """
    Write `sitemap-index.xml` and `sitemap-N.xml` files after a build.

    Every sitemap URL is absolute and carries the site's base path.
    """

    filter: object = None
    custom_pages: tuple = ()
    entry_limit: int = DEFAULT_ENTRY_LIMIT
    changefreq: str = None
    lastmod: object = None
    priority: float = None
    serialize: object = None

    name = "sitemap"

    def __post_init__(self):
        if self.entry_limit < 1:
            raise ConfigError("entry_limit must be at least 1")

        if self.changefreq is not None and self.changefreq not in CHANGEFREQ_VALUES:
            raise ConfigError(
                f"changefreq must be one of {', '.join(CHANGEFREQ_VALUES)}"
            )

        if self.priority is not None and not 0 <= self.priority <= 1:
            raise ConfigError("priority must be between 0.0 and 1.0")

    def collect_urls(self, builder) -> list:
        config = builder.config

        urls = [page.absolute_url for page in builder.pages if is_sitemap_page(page)]

        for custom_page in self.custom_pages:
            if urlparse(custom_page).scheme:
                urls.append(custom_page)
            else:
                urls.append(absolute_url(config.site, config.base, custom_page))

        urls = sorted(set(urls))

        if self.filter:
            urls = [url for url in urls if self.filter(url)]

        return urls

    def create_entries(self, builder) -> list:
        pages_by_url = {page.absolute_url: page for page in builder.pages}
        entries = []

        for url in self.collect_urls(builder):
            page = pages_by_url.get(url)

            entry = {
                "url": url,
                "lastmod": (page.updated if page else None) or self.lastmod,
                "changefreq": self.changefreq,
                "priority": self.priority,
            }

            if self.serialize:
                entry = self.serialize(entry)

                if entry is None:
                    continue

            entries.append(entry)

        return entries

    def post_build(self, site_state: dict, builder) -> None:
        config = builder.config

        if not config.site:
            logger.warning(
                "The sitemap integration requires the `site` config option. Skipping."
            )
            return

        entries = self.create_entries(builder)

        chunks = [
            entries[i : i + self.entry_limit]
            for i in range(0, len(entries), self.entry_limit)
        ] or [[]]

        sitemaps = []

        for idx, chunk in enumerate(chunks):
            file_name = SITEMAP_FILE.format(idx)

            with open(os.path.join(builder.out_dir, file_name), "w", encoding="utf-8") as f:
                f.write(XML_ENV.get_template("sitemap.xml").render(entries=chunk))

            sitemaps.append(
                {
                    "url": route_absolute_url(config.site, config.base, file_name),
                    "lastmod": self.lastmod,
                }
            )

        with open(
            os.path.join(builder.out_dir, SITEMAP_INDEX_FILE), "w", encoding="utf-8"
        ) as f:
            f.write(XML_ENV.get_template("sitemap-index.xml").render(sitemaps=sitemaps))

        logger.info(f"{SITEMAP_INDEX_FILE} created at {config.out_dir}")


def sitemap(
    filter=None,
    custom_pages=(),
    entry_limit: int = DEFAULT_ENTRY_LIMIT,
    changefreq: str = None,
    lastmod=None,
    priority: float = None,
    serialize=None,
) -> SitemapIntegration:
    return SitemapIntegration(
        filter=filter,
        custom_pages=tuple(custom_pages),
        entry_limit=entry_limit,
        changefreq=changefreq,
        lastmod=lastmod,
        priority=priority,
        serialize=serialize,
    )
