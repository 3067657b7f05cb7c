from yumdocs.integrations import mdx, sitemap

SITE = "https://example.com"
OUT_DIR = "_site"
BASE = "/library/"
INTEGRATIONS = [mdx(), sitemap(changefreq="weekly")]
SITE_STATE = {
    "title": "Library",
}
