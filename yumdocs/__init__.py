__version__ = "0.1.0"

from .config import SiteConfig, define_config, load_config
from .errors import BuildError, ConfigError
from .integrations import mdx, sitemap
from .build import build_site
