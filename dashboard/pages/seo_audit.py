"""SEO Audit: Streamlit dashboard page.

Shows bucket counts, a filter, and per-item findings with links to the
product or page edit form.  Further tabs list meta tags and summarise
the generated sitemap.
"""

import json

import pandas as pd
import streamlit as st

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_FILTER_LABELS = {
    "all": "All",
    "critical": "Critical",
    "warning": "Warnings",
    "good": "Good",
}


def _score_color(score: float) -> str:
    if score >= 80:
        return "#16a34a"
    if score >= 60:
        return "#ca8a04"
    return "#dc2626"


def _score_badge(score: int, label: str) -> str:
    c = _score_color(score)
    return (
        "<span style=\"background:{c};color:white;padding:2px 10px;"
        "border-radius:9999px;font-size:0.8rem;font-weight:bold;\">"
        "{score}% - {label}</span>"
    ).format(c=c, score=score, label=label)


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

def render_seo_audit_page(instance):
    """Render the SEO Audit dashboard page."""
    st.title("SEO Audit")
    st.markdown("Comprehensive analysis of all published pages on your site.")

    tabs = st.tabs(["Audit", "Meta Tags", "Sitemap"])
    with tabs[0]:
        _tab_audit(instance)
    with tabs[1]:
        _tab_meta_tags(instance)
    with tabs[2]:
        _tab_sitemap(instance)


def _tab_audit(instance):
    from storefront_seo.modules.seo_audit import FILTERS, filter_results, score_label, summarize

    assembler = instance.get_assembler()
    results = assembler.build_report()
    counts = summarize(results)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Pages", counts["total"])
    with col2:
        st.metric("Critical Issues", counts["critical"])
    with col3:
        st.metric("Warnings", counts["warning"])
    with col4:
        st.metric("Good", counts["good"])

    choice = st.radio(
        "Filter",
        FILTERS,
        format_func=lambda f: "{label} ({n})".format(
            label=_FILTER_LABELS[f], n=counts["total"] if f == "all" else counts[f]
        ),
        horizontal=True,
        key="seo_audit_filter",
    )
    shown = filter_results(results, choice)

    st.download_button(
        "Download JSON",
        data=json.dumps([r.to_dict() for r in shown], indent=2),
        file_name="seo_audit.json",
        mime="application/json",
    )

    if not shown:
        st.info("No results found for this filter.")
        return

    for result in shown:
        with st.expander(f"{result.title or '(untitled)'}  ·  {result.score}%"):
            st.markdown(
                _score_badge(result.score, score_label(result.score))
                + f" &nbsp; `{result.kind.value}` &nbsp; /{result.slug}",
                unsafe_allow_html=True,
            )
            if result.issues:
                st.markdown("**Critical Issues:**")
                for issue in result.issues:
                    st.markdown(f":red[- {issue}]")
            if result.warnings:
                st.markdown("**Warnings:**")
                for warning in result.warnings:
                    st.markdown(f":orange[- {warning}]")
            if result.successes:
                st.markdown("**Optimized:**")
                for success in result.successes:
                    st.markdown(f":green[- {success}]")
            st.markdown(f"[Fix Issues]({assembler.edit_path(result)})")


def _tab_meta_tags(instance):
    from storefront_seo.modules.seo_audit.overview import META_FILTERS, list_meta_tags

    choice = st.radio("Show", META_FILTERS, horizontal=True, key="seo_meta_filter")
    items = instance.get_repository().list_published_auditable_items()
    rows = list_meta_tags(items, choice)
    if not rows:
        st.info("No items match this filter.")
        return
    df = pd.DataFrame(rows)[[
        "title", "type", "meta_title", "meta_title_length",
        "meta_description", "meta_description_length",
    ]]
    st.dataframe(df, use_container_width=True, hide_index=True)


def _tab_sitemap(instance):
    from storefront_seo.modules.sitemap import render_robots_txt, render_sitemap_xml, sitemap_stats

    st.info(
        "The sitemap includes all published products and pages. "
        "It is regenerated from the database every time it is built."
    )
    entries = instance.build_sitemap()
    stats = sitemap_stats(entries)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total URLs", stats["total_urls"])
    with col2:
        st.metric("Static Routes", stats["static"])
    with col3:
        st.metric("Products", stats["products"])
    with col4:
        st.metric("Pages", stats["pages"])

    site_url = instance.get_site_url()
    st.text_input("Sitemap URL", value=site_url + "/sitemap.xml", disabled=True)

    col_a, col_b = st.columns(2)
    with col_a:
        st.download_button(
            "Download sitemap.xml",
            data=render_sitemap_xml(entries),
            file_name="sitemap.xml",
            mime="application/xml",
        )
    with col_b:
        st.download_button(
            "Download robots.txt",
            data=render_robots_txt(site_url),
            file_name="robots.txt",
            mime="text/plain",
        )

    df = pd.DataFrame([
        {
            "url": e.loc,
            "kind": e.kind,
            "lastmod": e.lastmod.strftime("%Y-%m-%d"),
            "changefreq": e.changefreq,
            "priority": e.priority,
        }
        for e in entries
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)
