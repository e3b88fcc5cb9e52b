"""Storefront SEO: Dashboard

Main Streamlit application with sidebar navigation.
Run with: streamlit run dashboard/app.py
"""

import logging
import streamlit as st
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="Storefront SEO Dashboard",
    page_icon="🔎",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_app():
    """Initialise the application once per Streamlit server process."""
    from storefront_seo.app import StorefrontSEO
    instance = StorefrontSEO(config_path=str(project_root / "config" / "settings.yaml"))
    instance.initialize()
    return instance


def main():
    if "current_page" not in st.session_state:
        st.session_state.current_page = "overview"

    with st.sidebar:
        st.markdown("### 🔎 Storefront SEO")
        st.markdown("---")

        pages = {
            "overview": ("🏠", "Overview"),
            "audit": ("📋", "SEO Audit"),
        }
        for page_id, (icon, label) in pages.items():
            is_active = st.session_state.current_page == page_id
            if st.button(
                f"{icon}  {label}",
                key=f"nav_{page_id}",
                type="primary" if is_active else "secondary",
                use_container_width=True,
            ):
                st.session_state.current_page = page_id
                st.rerun()

    try:
        instance = get_app()
    except Exception as exc:
        logger.error("Dashboard failed to initialise: %s", exc)
        st.error("Could not initialise the database: " + str(exc))
        return

    if st.session_state.current_page == "audit":
        from pages.seo_audit import render_seo_audit_page
        render_seo_audit_page(instance)
    else:
        render_overview(instance)


def render_overview(instance):
    """Coverage metrics and focus keyword usage."""
    st.title("🏠 SEO Tools")
    st.markdown("Meta tag coverage across all published products and pages.")

    stats = instance.get_overview()

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Pages", stats["total_pages"],
                  help=f"{stats['products']} products, {stats['pages']} pages")
    with col2:
        st.metric("SEO Completion", f"{stats['completion_rate']}%",
                  help="Items with a meta title override")
    with col3:
        st.metric("Missing Descriptions", stats["missing_meta_description"])
    with col4:
        st.metric("Avg Audit Score", stats["avg_seo_score"])

    if stats["missing_meta_title"] or stats["missing_meta_description"]:
        lines = []
        if stats["missing_meta_description"]:
            lines.append(f"- {stats['missing_meta_description']} pages missing meta descriptions")
        if stats["missing_meta_title"]:
            lines.append(f"- {stats['missing_meta_title']} pages missing meta titles")
        st.warning("**SEO issues detected**\n\n" + "\n".join(lines))

    st.markdown("---")
    st.markdown("### Focus keyword usage")
    if not stats["keywords"]:
        st.info("No focus keywords set yet. Add one in the SEO section of a product or page.")
        return
    st.markdown(" ".join(
        f"`{keyword}` **{count}**" for keyword, count in stats["keywords"]
    ))


if __name__ == "__main__":
    main()
