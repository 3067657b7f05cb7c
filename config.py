from yumdocs.integrations import mdx, sitemap

SITE = "https://yumshot.github.io/yum-docs"  # GitHub Pages URL
OUT_DIR = "docs"  # GitHub Pages serves from the docs folder
BASE = "/yum-docs/"  # the repository name
INTEGRATIONS = [mdx(), sitemap()]
