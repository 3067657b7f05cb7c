import os
from urllib.parse import urljoin, urlparse

PAGE_INDEX_NAMES = ["index.html", "index.md", "index.mdx"]

# files whose route keeps its filename instead of becoming a directory
VERBATIM_EXTENSIONS = [".txt", ".xml", ".css", ".js", ".json"]


def normalize_base(base: str) -> str:
    """
    Normalize a base path so it starts and ends with a slash.

    `""`, `"/"` and `None` all become `"/"`.
    """
    base = (base or "").strip("/")

    if not base:
        return "/"

    return f"/{base}/"


def route_for(relative_path: str, permalink: str = None) -> str:
    """
    Compute the route of a page from its path inside the pages directory.

    - index.html -> /
    - guide/intro.md -> /guide/intro/
    - guide/index.md -> /guide/
    - 404.html -> /404.html
    - robots.txt -> /robots.txt
    """
    if permalink:
        permalink = permalink.strip()

        if os.path.splitext(permalink)[1]:
            return "/" + permalink.strip("/")

        return "/" + (permalink.strip("/") + "/").lstrip("/")

    relative_path = relative_path.replace(os.sep, "/")
    directory, file_name = os.path.split(relative_path)
    stem, ext = os.path.splitext(file_name)

    if file_name in PAGE_INDEX_NAMES:
        return "/" + (directory + "/" if directory else "")

    if ext in VERBATIM_EXTENSIONS or stem == "404":
        if stem == "404":
            file_name = "404.html"
        return "/" + "/".join(p for p in [directory, file_name] if p)

    return "/" + "/".join(p for p in [directory, stem] if p) + "/"


def output_path_for(route: str) -> str:
    """Map a route to a file path relative to the output directory."""
    path = route.lstrip("/")

    if not path or path.endswith("/"):
        path += "index.html"

    return path


def route_url(base: str, route: str) -> str:
    """Prefix a route with the base path. Routes are always relative to the base."""
    return normalize_base(base) + route.lstrip("/")


def route_absolute_url(site: str, base: str, route: str = "/") -> str:
    if site is None:
        return route_url(base, route)

    return urljoin(site, route_url(base, route))


def with_base(base: str, path: str) -> str:
    """
    Prefix a site-relative path written by a page author with the base path.

    Absolute URLs, fragments, and paths already carrying the base are left alone.
    Use `route_url` for page routes.
    """
    if not isinstance(path, str):
        return path

    if urlparse(path).scheme or path.startswith(("#", "//", "?")):
        return path

    base = normalize_base(base)

    if base != "/" and (path + "/").startswith(base):
        return path

    return base + path.lstrip("/")


def absolute_url(site: str, base: str, path: str = "/") -> str:
    """Join the site origin, the base path, and an author-written link into an absolute URL."""
    if site is None:
        return with_base(base, path)

    return urljoin(site, with_base(base, path))
