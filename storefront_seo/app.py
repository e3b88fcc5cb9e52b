"""Main application orchestrator for Storefront SEO."""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "app": {
        "name": "Storefront SEO",
        "data_dir": "data",
        "export_dir": "data/exports",
    },
    "database": {
        "url": None,
        "echo": False,
    },
    "audit": {
        "edit_path_prefix": "/dashboard",
    },
    "sitemap": {
        "base_url": None,
    },
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class StorefrontSEO:
    """Central application class that wires configuration, database and audit.

    Usage::

        app = StorefrontSEO()
        app.initialize()
        results = app.run_audit()
        stats = app.get_overview()
    """

    def __init__(
        self,
        config_path: str = "config/settings.yaml",
        env_path: str = ".env",
    ):
        self._config_path = config_path
        self._env_path = env_path
        self.config: dict[str, Any] = {}
        self._initialized = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Load environment and configuration, then initialise the database."""
        if self._initialized:
            return

        env_file = Path(self._env_path)
        if env_file.exists():
            load_dotenv(env_file)
            logger.info("Loaded environment from %s", self._env_path)

        self.config = _merge(DEFAULT_CONFIG, self._load_config())

        for dir_key in ("data_dir", "export_dir"):
            dir_path = self.config["app"].get(dir_key, "")
            if dir_path:
                Path(dir_path).mkdir(parents=True, exist_ok=True)

        from storefront_seo.database import init_db
        db_cfg = self.config["database"]
        init_db(database_url=db_cfg.get("url"), echo=db_cfg.get("echo", False))

        self._initialized = True
        logger.info("StorefrontSEO initialised.")

    def _load_config(self) -> dict[str, Any]:
        """Load the YAML configuration file."""
        config_file = Path(self._config_path)
        if not config_file.exists():
            logger.warning("Config file not found: %s; using defaults.", self._config_path)
            return {}
        with open(config_file, "r", encoding="utf-8") as fh:
            config = yaml.safe_load(fh) or {}
        logger.info("Configuration loaded from %s", self._config_path)
        return config

    # ------------------------------------------------------------------
    # Audit wiring
    # ------------------------------------------------------------------

    def get_repository(self):
        """SQL-backed content repository bound to the global session factory."""
        self._ensure_initialized()
        from storefront_seo.database import get_session_factory
        from storefront_seo.modules.seo_audit import SQLAlchemyContentRepository
        return SQLAlchemyContentRepository(get_session_factory())

    def get_assembler(self):
        """Audit report assembler over :meth:`get_repository`."""
        from storefront_seo.modules.seo_audit import AuditReportAssembler
        prefix = self.config["audit"].get("edit_path_prefix", "/dashboard")
        return AuditReportAssembler(self.get_repository(), edit_path_prefix=prefix)

    def run_audit(self):
        """Audit every published item; results sorted worst first."""
        return self.get_assembler().build_report()

    def get_overview(self) -> dict[str, Any]:
        """Coverage stats plus keyword usage for the overview screen."""
        from storefront_seo.modules.seo_audit import AuditReportAssembler
        from storefront_seo.modules.seo_audit.overview import compute_overview_stats, keyword_usage

        items = self.get_repository().list_published_auditable_items()
        results = AuditReportAssembler.audit_items(items)
        stats = compute_overview_stats(items, results)
        stats["keywords"] = keyword_usage(items)
        return stats

    def get_site_url(self) -> str:
        """Public storefront URL: config, then ``SITE_URL``, then localhost."""
        from storefront_seo.modules.sitemap.generator import DEFAULT_BASE_URL
        configured = (self.config.get("sitemap") or {}).get("base_url")
        return (configured or os.getenv("SITE_URL") or DEFAULT_BASE_URL).rstrip("/")

    def build_sitemap(self, now=None):
        """Sitemap entries for every published product and page."""
        self._ensure_initialized()
        from storefront_seo.database import get_session_factory
        from storefront_seo.modules.sitemap import SitemapBuilder
        return SitemapBuilder(get_session_factory(), self.get_site_url()).build(now)

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Call initialize() before using the application.")
