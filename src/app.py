#!/usr/bin/env python
"""
Streamlit viewer for pagerecon.

Run with:
    streamlit run src/app.py

Features:
- Upload PDF or DOCX files, or point at a URL
- Rendered preview with Markdown table regions shown as tables
- Raw HTML, JSON and metrics views
- Download results in multiple formats
"""

import sys
from pathlib import Path

# Add src directory to path for imports when running as script
_src_dir = Path(__file__).parent
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

import asyncio
import logging
from typing import Optional

import streamlit as st

from pagerecon import __version__
from pagerecon.exceptions import PageReconError

logger = logging.getLogger("pagerecon.app")


# Page config must be first Streamlit command
st.set_page_config(
    page_title="Page Reconstruction",
    page_icon="📄",
    layout="wide",
    initial_sidebar_state="expanded"
)


def load_css():
    """Load custom CSS styles."""
    from pagerecon.utils.export import DOCUMENT_CSS

    st.markdown(f"""
    <style>
    .main-header {{
        font-size: 2.5rem;
        font-weight: bold;
        color: #1E88E5;
        text-align: center;
        margin-bottom: 1rem;
    }}
    .sub-header {{
        font-size: 1.2rem;
        color: #888;
        text-align: center;
        margin-bottom: 2rem;
    }}
    {DOCUMENT_CSS}
    </style>
    """, unsafe_allow_html=True)


def init_session_state():
    """Initialize session state variables."""
    if "result" not in st.session_state:
        st.session_state.result = None


def render_sidebar() -> dict:
    """Render sidebar settings."""
    st.sidebar.header("⚙️ Settings")

    tolerance = st.sidebar.slider(
        "Line tolerance",
        min_value=0.5,
        max_value=6.0,
        value=2.0,
        step=0.5,
        help="Runs whose baselines differ by at most this much share a line"
    )

    show_raw_tables = st.sidebar.checkbox(
        "Show table sentinels",
        value=False,
        help="Show Markdown table regions as source instead of rendered tables"
    )

    return {"tolerance": tolerance, "show_raw_tables": show_raw_tables}


@st.cache_data(ttl=300)
def process_document(data: bytes, file_type: str, name: str, tolerance: float) -> Optional[dict]:
    """Convert uploaded bytes; returns a plain dict so the result can be cached."""
    from pagerecon.config import get_config
    from pagerecon.converter import convert_bytes_to_html, convert_document, extract_text
    from pagerecon.utils.export import HtmlExporter, MarkdownExporter

    config = get_config()
    config.lines.y_tolerance = tolerance

    async def _run() -> dict:
        result = {"name": name, "file_type": file_type}
        if file_type == "pdf":
            document = await convert_document(data, file_type, source_file=name, config=config)
            result["html"] = HtmlExporter.from_config(config.html).to_html(document)
            result["markdown"] = MarkdownExporter().to_markdown(document)
            result["document"] = document.to_dict()
        else:
            result["html"] = await convert_bytes_to_html(data, file_type, config=config)
        result["text"] = await extract_text(data, file_type)
        return result

    return asyncio.run(_run())


def render_metrics(metrics: dict):
    """Render document metrics."""
    cols = st.columns(4)
    lines = metrics.get("lines", {})
    tables = metrics.get("tables", {})

    with cols[0]:
        st.metric("Pages", metrics.get("pages_processed", 0))
    with cols[1]:
        st.metric("Lines", lines.get("total", 0))
    with cols[2]:
        st.metric("Tables", tables.get("total", 0))
    with cols[3]:
        st.metric("Baseline size", f"{metrics.get('mean_baseline_font_size', 0):.1f}")

    by_role = lines.get("by_role", {})
    if by_role:
        st.bar_chart(by_role)


def render_content(html: str, show_raw_tables: bool):
    """Render converted HTML, drawing Markdown table regions as tables."""
    from pagerecon.utils.export import split_segments

    for segment in split_segments(html):
        if segment.kind == "md":
            if show_raw_tables:
                st.code(segment.content, language="markdown")
            else:
                st.markdown(segment.content)
        else:
            st.markdown(segment.content, unsafe_allow_html=True)


def render_downloads(result: dict):
    """Render download buttons."""
    from pagerecon.utils.export import standalone_page
    from pagerecon.utils.io import to_json

    st.subheader("📥 Downloads")
    stem = Path(result["name"]).stem or "document"
    cols = st.columns(4)

    with cols[0]:
        st.download_button(
            "🌐 HTML",
            standalone_page(result["html"], title=stem),
            file_name=f"{stem}.html",
            mime="text/html",
            use_container_width=True
        )

    with cols[1]:
        st.download_button(
            "📃 Text",
            result.get("text", ""),
            file_name=f"{stem}.txt",
            mime="text/plain",
            use_container_width=True
        )

    if "document" in result:
        with cols[2]:
            st.download_button(
                "📝 Markdown",
                result.get("markdown", ""),
                file_name=f"{stem}.md",
                mime="text/markdown",
                use_container_width=True
            )
        with cols[3]:
            st.download_button(
                "📄 JSON",
                to_json(result["document"]),
                file_name=f"{stem}.json",
                mime="application/json",
                use_container_width=True
            )


def main():
    """Main application."""
    load_css()
    init_session_state()

    st.markdown('<h1 class="main-header">📄 Page Reconstruction</h1>', unsafe_allow_html=True)
    st.markdown(
        '<p class="sub-header">Rebuild structured HTML from PDF and DOCX documents</p>',
        unsafe_allow_html=True
    )

    settings = render_sidebar()

    st.markdown("---")

    uploaded_file = st.file_uploader(
        "Upload a document",
        type=["pdf", "docx"],
        help="Upload a PDF or DOCX file to convert"
    )

    if uploaded_file:
        col1, col2 = st.columns([2, 1])

        with col1:
            st.info(f"📁 **{uploaded_file.name}** ({uploaded_file.size / 1024:.1f} KB)")

        with col2:
            process_btn = st.button(
                "🚀 Convert Document",
                use_container_width=True,
                type="primary"
            )

        if process_btn:
            from pagerecon.utils.io import detect_input_type

            with st.spinner("Converting document..."):
                try:
                    st.session_state.result = process_document(
                        uploaded_file.getvalue(),
                        detect_input_type(uploaded_file.name),
                        uploaded_file.name,
                        settings["tolerance"]
                    )
                    st.success("✅ Document converted successfully!")
                except PageReconError as e:
                    logger.error(f"Conversion failed: {e}")
                    st.session_state.result = None
                    st.error("Failed to load document. Please try again.")

    result = st.session_state.result
    if result:
        st.markdown("---")

        tab_names = ["📖 Content", "🌐 HTML", "📃 Text"]
        if "document" in result:
            tab_names += ["📊 Metrics", "📄 Raw JSON"]
        tabs = st.tabs(tab_names)

        with tabs[0]:
            render_content(result["html"], settings["show_raw_tables"])

        with tabs[1]:
            st.code(result["html"], language="html")

        with tabs[2]:
            st.text(result.get("text", ""))

        if "document" in result:
            with tabs[3]:
                render_metrics(result["document"].get("metrics", {}))
            with tabs[4]:
                st.json(result["document"])

        st.markdown("---")
        render_downloads(result)

    st.markdown("---")
    st.markdown(
        f"""
        <div style="text-align: center; color: #666; font-size: 0.8rem;">
            pagerecon v{__version__} |
            Built with Streamlit and PyMuPDF
        </div>
        """,
        unsafe_allow_html=True
    )


if __name__ == "__main__":
    main()
