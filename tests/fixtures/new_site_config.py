from yumdocs.integrations import mdx, sitemap

SITE = "https://example.com"
OUT_DIR = "dist"
BASE = "/"
INTEGRATIONS = [mdx(), sitemap()]
