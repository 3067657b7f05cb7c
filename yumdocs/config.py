import importlib.util
import os
import sys
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import urlparse

from .errors import ConfigError
from .integrations import Integration
from .routing import normalize_base

DEFAULT_ROOT_DIR = "pages"
DEFAULT_LAYOUTS_BASE_DIR = "_layouts"
DEFAULT_PUBLIC_DIR = "public"

REQUIRED_SETTINGS = ["SITE", "OUT_DIR", "BASE", "INTEGRATIONS"]


@dataclass(frozen=True)
class SiteConfig:
    """
    Build parameters for a site.

    Instances are immutable. `integrations` is stored as a tuple and
    `site_state` as a read-only mapping.
    """

    site: str
    out_dir: str
    base: str
    integrations: tuple = ()
    root_dir: str = DEFAULT_ROOT_DIR
    layouts_dir: str = DEFAULT_LAYOUTS_BASE_DIR
    public_dir: str = DEFAULT_PUBLIC_DIR
    site_state: MappingProxyType = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def base_path(self) -> str:
        return normalize_base(self.base)

    def as_dict(self) -> dict:
        return {
            "site": self.site,
            "out_dir": self.out_dir,
            "base": self.base,
            "integrations": [i.name for i in self.integrations],
            "root_dir": self.root_dir,
            "layouts_dir": self.layouts_dir,
            "public_dir": self.public_dir,
            "site_state": dict(self.site_state),
        }


def _validate_site(site):
    if site is None:
        return

    parsed = urlparse(site) if isinstance(site, str) else None

    if not parsed or parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"site must be an absolute http(s) URL, got {site!r}")


def contains_path(parent: str, path: str) -> bool:
    """Return True if `path` is `parent` or lies inside it."""
    parent = os.path.abspath(parent)
    path = os.path.abspath(path)

    try:
        return os.path.commonpath([parent, path]) == parent
    except ValueError:
        # different drives
        return False


def validate_out_dir(out_dir, root_dir, public_dir, project_dir="."):
    """
    Reject output directories whose removal would delete the project's sources.

    The output directory is emptied on every build, so it may not be the project
    directory or one of its parents, and may not overlap the pages or public
    directories.
    """
    if not isinstance(out_dir, str) or not out_dir.strip():
        raise ConfigError("out_dir must be a non-empty path")

    out_path = os.path.join(project_dir, out_dir)

    if contains_path(out_path, project_dir):
        raise ConfigError(
            f"out_dir cannot be the project directory or one of its parents ({out_dir!r})"
        )

    for name, directory in (("pages", root_dir), ("public", public_dir)):
        directory = os.path.join(project_dir, directory)

        if contains_path(out_path, directory) or contains_path(directory, out_path):
            raise ConfigError(f"out_dir cannot overlap the {name} directory ({out_dir!r})")


def _validate_integrations(integrations) -> tuple:
    integrations = tuple(integrations or ())
    seen = set()

    for integration in integrations:
        if not isinstance(integration, Integration):
            raise ConfigError(
                f"{integration!r} is not an integration. "
                "Call the integration factory, e.g. mdx() rather than mdx."
            )
        if integration.name in seen:
            raise ConfigError(f"integration {integration.name!r} is listed twice")
        seen.add(integration.name)

    return integrations


def define_config(
    site,
    out_dir,
    base="/",
    integrations=(),
    root_dir=DEFAULT_ROOT_DIR,
    layouts_dir=DEFAULT_LAYOUTS_BASE_DIR,
    public_dir=DEFAULT_PUBLIC_DIR,
    site_state=None,
    project_dir=".",
) -> SiteConfig:
    """
    Validate build parameters and freeze them into a `SiteConfig`.

    Relative directories are resolved against `project_dir`, which is not stored.
    """
    _validate_site(site)
    validate_out_dir(out_dir, root_dir, public_dir, project_dir)

    if not isinstance(base, str):
        raise ConfigError(f"base must be a string, got {base!r}")

    return SiteConfig(
        site=site,
        out_dir=out_dir,
        base=base,
        integrations=_validate_integrations(integrations),
        root_dir=root_dir,
        layouts_dir=layouts_dir,
        public_dir=public_dir,
        site_state=MappingProxyType(dict(site_state or {})),
    )


def load_config(path: str = "config.py") -> SiteConfig:
    """
    Load a `config.py` file and turn its upper-case settings into a `SiteConfig`.

    A config file looks like:

        SITE = "https://example.com"
        OUT_DIR = "docs"
        BASE = "/"
        INTEGRATIONS = [mdx(), sitemap()]
    """
    if not os.path.exists(path):
        raise ConfigError(f"{os.path.basename(path)} not found")

    project_dir = os.path.dirname(os.path.abspath(path))

    spec = importlib.util.spec_from_file_location("config", path)
    module = importlib.util.module_from_spec(spec)

    # lets config.py import integrations defined next to it
    sys.path.insert(0, project_dir)
    try:
        spec.loader.exec_module(module)
    finally:
        sys.path.remove(project_dir)

    missing = [name for name in REQUIRED_SETTINGS if not hasattr(module, name)]

    if missing:
        raise ConfigError(f"{path} is missing {', '.join(missing)}")

    return define_config(
        site=module.SITE,
        out_dir=module.OUT_DIR,
        base=module.BASE,
        integrations=module.INTEGRATIONS,
        root_dir=getattr(module, "ROOT_DIR", DEFAULT_ROOT_DIR),
        layouts_dir=getattr(module, "LAYOUTS_BASE_DIR", DEFAULT_LAYOUTS_BASE_DIR),
        public_dir=getattr(module, "PUBLIC_DIR", DEFAULT_PUBLIC_DIR),
        site_state=getattr(module, "SITE_STATE", {}),
        project_dir=project_dir,
    )
