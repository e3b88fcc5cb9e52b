"""Integration tests for Storefront SEO.

Covers database setup, model and module imports, the application object,
configuration loading, and syntax validation of every Python file in the
project.
"""

import ast
import importlib
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Project root (conftest.py already puts it on sys.path)
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent


# ===========================================================================
# 1. Database setup
# ===========================================================================
class TestDatabaseSetup:
    """Verify that the database can be initialised with in-memory SQLite."""

    def test_init_db_creates_tables(self, test_db):
        from sqlalchemy import inspect
        from storefront_seo.database import get_engine

        table_names = inspect(get_engine()).get_table_names()
        for table in ("products", "pages", "seo_metadata"):
            assert table in table_names, (
                "Missing table: " + table + ". Found: " + str(table_names)
            )

    def test_get_session_context_manager(self, test_db):
        from sqlalchemy import text as sa_text
        from storefront_seo.database import get_session

        with get_session() as session:
            row = session.execute(sa_text("SELECT 1")).fetchone()
            assert row is not None
            assert row[0] == 1

    def test_get_session_rolls_back_on_error(self, test_db):
        from sqlalchemy import select
        from storefront_seo.database import get_session
        from storefront_seo.models import Product

        with pytest.raises(RuntimeError):
            with get_session() as session:
                session.add(Product(title="Galaxy Tab", slug="galaxy-tab"))
                session.flush()
                raise RuntimeError("abort")

        with get_session() as session:
            assert session.scalars(select(Product)).all() == []

    def test_reset_db(self, seeded_db):
        from sqlalchemy import select
        from storefront_seo.database import get_session, reset_db
        from storefront_seo.models import Product

        reset_db()
        with get_session() as session:
            assert session.scalars(select(Product)).all() == []

    def test_duplicate_seo_row_rejected(self, seeded_db):
        from sqlalchemy.exc import IntegrityError
        from storefront_seo.database import get_session
        from storefront_seo.models import SEOMetadata

        with pytest.raises(IntegrityError):
            with get_session() as session:
                session.add(SEOMetadata(entity_type="product", entity_id="p-1"))


# ===========================================================================
# 2. Model and module imports
# ===========================================================================
class TestModelImports:
    """All ORM models should be importable from storefront_seo.models."""

    @pytest.mark.parametrize("model_name", ["Product", "Page", "SEOMetadata"])
    def test_model_importable(self, model_name):
        import storefront_seo.models as models_pkg
        assert hasattr(models_pkg, model_name), (
            "storefront_seo.models has no attribute " + model_name
        )


class TestModuleImports:
    """Every module should import and expose its public names."""

    @pytest.mark.parametrize("module_path,names", [
        ("storefront_seo.modules.seo_audit.engine", ["audit", "completeness_score", "AuditableItem"]),
        ("storefront_seo.modules.seo_audit.adapters", ["product_to_item", "page_to_item", "normalize_seo"]),
        ("storefront_seo.modules.seo_audit.repository", ["ContentRepository", "SQLAlchemyContentRepository"]),
        ("storefront_seo.modules.seo_audit.assembler", ["AuditReportAssembler", "AuditResult"]),
        ("storefront_seo.modules.seo_audit.overview", ["compute_overview_stats", "list_meta_tags", "keyword_usage"]),
        ("storefront_seo.modules.sitemap.generator", ["SitemapBuilder", "render_sitemap_xml", "render_robots_txt"]),
        ("storefront_seo.utils.content_loader", ["load_content_file", "ContentLoadError"]),
        ("storefront_seo.app", ["StorefrontSEO"]),
        ("storefront_seo.cli", ["app", "main"]),
    ])
    def test_module_importable(self, module_path, names):
        mod = importlib.import_module(module_path)
        for name in names:
            assert hasattr(mod, name), module_path + " has no attribute " + name


# ===========================================================================
# 3. Application object
# ===========================================================================
class TestStorefrontSEO:
    """StorefrontSEO wires config, database and audit together."""

    def test_requires_initialize(self, tmp_path):
        from storefront_seo.app import StorefrontSEO
        instance = StorefrontSEO(config_path=str(tmp_path / "missing.yaml"))
        with pytest.raises(RuntimeError, match="initialize"):
            instance.get_repository()

    def test_defaults_when_config_missing(self, tmp_path, monkeypatch):
        from storefront_seo.app import DEFAULT_CONFIG, StorefrontSEO
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")

        instance = StorefrontSEO(config_path="missing.yaml")
        instance.initialize()
        assert instance.config == DEFAULT_CONFIG
        assert (tmp_path / "data" / "exports").is_dir()
        assert instance.run_audit() == []

    def test_config_file_overrides_defaults(self, tmp_path, monkeypatch, make_item):
        from storefront_seo.app import StorefrontSEO
        monkeypatch.chdir(tmp_path)
        config_path = tmp_path / "settings.yaml"
        config_path.write_text(
            "database:\n  url: \"sqlite:///:memory:\"\naudit:\n  edit_path_prefix: /admin\n",
            encoding="utf-8",
        )

        instance = StorefrontSEO(config_path=str(config_path))
        instance.initialize()
        assert instance.config["audit"]["edit_path_prefix"] == "/admin"
        assert instance.config["app"]["data_dir"] == "data"
        assembler = instance.get_assembler()
        (result,) = assembler.audit_items([make_item(id="p1")])
        assert assembler.edit_path(result) == "/admin/products/p1"

    def test_run_audit_and_overview(self, tmp_path, monkeypatch, seeded_db):
        from storefront_seo.app import StorefrontSEO
        monkeypatch.chdir(tmp_path)

        instance = StorefrontSEO(config_path="missing.yaml")
        instance.initialize()
        assert [r.id for r in instance.run_audit()] == ["p-2", "pg-1", "p-1"]

        stats = instance.get_overview()
        assert stats["total_pages"] == 3
        assert stats["keywords"] == [("galaxy s25", 1)]
        assert stats["avg_seo_score"] == 53.3

    def test_site_url_from_env_then_config(self, tmp_path, monkeypatch):
        from storefront_seo.app import DEFAULT_CONFIG, StorefrontSEO
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
        monkeypatch.setenv("SITE_URL", "https://env.example.com/")

        instance = StorefrontSEO(config_path="missing.yaml")
        instance.initialize()
        assert instance.get_site_url() == "https://env.example.com"

        instance.config["sitemap"]["base_url"] = "https://shop.example.com"
        assert instance.get_site_url() == "https://shop.example.com"

        assert DEFAULT_CONFIG["sitemap"]["base_url"] is None

    def test_build_sitemap(self, tmp_path, monkeypatch, seeded_db):
        from storefront_seo.app import StorefrontSEO
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("SITE_URL", raising=False)

        instance = StorefrontSEO(config_path="missing.yaml")
        instance.initialize()
        locs = [e.loc for e in instance.build_sitemap()]
        assert locs[0] == "http://localhost:3000/"
        assert "http://localhost:3000/product/galaxy-buds" in locs
        assert len(locs) == 7


# ===========================================================================
# 4. settings.yaml
# ===========================================================================
class TestSettingsYaml:
    """Configuration file should be loadable."""

    def _load(self):
        import yaml
        with open(PROJECT_ROOT / "config" / "settings.yaml", encoding="utf-8") as fh:
            return yaml.safe_load(fh)

    def test_settings_file_exists(self):
        assert (PROJECT_ROOT / "config" / "settings.yaml").exists(), "config/settings.yaml not found"

    def test_settings_has_required_sections(self):
        config = self._load()
        assert isinstance(config, dict)
        for section in ("app", "database", "audit", "sitemap"):
            assert section in config, "Missing config section: " + section

    def test_settings_app_name(self):
        assert self._load()["app"]["name"] == "Storefront SEO"


# ===========================================================================
# 5. All Python files syntax validation
# ===========================================================================
class TestAllPythonFilesSyntax:
    """Every .py file in storefront_seo/, dashboard/ and tests/ should pass ast.parse."""

    def _collect_python_files(self):
        files = []
        for directory in ("storefront_seo", "dashboard", "tests"):
            base = PROJECT_ROOT / directory
            if base.exists():
                for py_file in base.rglob("*.py"):
                    parts = py_file.parts
                    if "venv" in parts or "__pycache__" in parts:
                        continue
                    files.append(py_file)
        return sorted(files)

    def test_all_python_files_parse(self):
        py_files = self._collect_python_files()
        assert len(py_files) > 0, "No Python files found"
        errors = []
        for py_file in py_files:
            try:
                ast.parse(py_file.read_text(encoding="utf-8"))
            except SyntaxError as exc:
                errors.append(str(py_file.relative_to(PROJECT_ROOT)) + ": " + str(exc))
        if errors:
            pytest.fail("Python syntax errors found:\n" + "\n".join(errors[:20]))


# ===========================================================================
# 6. Requirements / key packages importable
# ===========================================================================
class TestRequirementsInstallable:
    """Key packages from requirements.txt should be importable."""

    @pytest.mark.parametrize("package", [
        "typer",
        "rich",
        "sqlalchemy",
        "yaml",  # PyYAML
        "dotenv",  # python-dotenv
        "streamlit",
        "pandas",
    ])
    def test_package_importable(self, package):
        try:
            importlib.import_module(package)
        except ImportError:
            pytest.skip("Package not installed: " + package)
