"""Streamlit web interface for the YouTube Content Optimizer."""

import streamlit as st
import structlog
from dotenv import load_dotenv

load_dotenv()

from config import config
from core.export import MARKDOWN_FILENAME, METADATA_FILENAME
from core.generate import analyze_script, GenerationError
from core.prompt import PromptError
from core.sections import Section
from core.validate import (
    MetadataSchema,
    ResponseReport,
    TITLE_SECTION_TITLE,
    build_report,
    extract_metadata_json,
    title_length,
)
from storage import LocalCache, StorageError

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.dev.ConsoleRenderer(colors=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

# Set page config - must be the first Streamlit command
st.set_page_config(
    page_title="YouTube Content Optimizer (US)",
    page_icon="▶️",
    layout="wide"
)

cache = LocalCache()

# Initialize session state, restoring the last script and result from the cache
if 'script' not in st.session_state:
    st.session_state.script = cache.load_script()
if 'result' not in st.session_state:
    st.session_state.result = cache.load_result()
if 'error' not in st.session_state:
    st.session_state.error = None
if 'processing' not in st.session_state:
    st.session_state.processing = False


def metadata_schema() -> MetadataSchema:
    validation = config.validation
    return MetadataSchema(
        default_language=validation.default_language,
        default_audio_language=validation.default_audio_language,
        section_title=validation.metadata_section_title
    )


def on_script_change():
    """Persist every edit, including clearing the box"""
    try:
        cache.save_script(st.session_state.script)
    except StorageError as e:
        logger.warning("Could not cache script", error=str(e))


def clear_all():
    st.session_state.script = ""
    st.session_state.result = None
    st.session_state.error = None
    try:
        cache.clear()
    except StorageError as e:
        logger.warning("Could not clear cache", error=str(e))


def run_optimization():
    """Send the script to the generation service; one request at a time"""
    script = st.session_state.script
    if not script.strip() or st.session_state.processing:
        return

    st.session_state.processing = True
    st.session_state.result = None
    st.session_state.error = None

    try:
        result = analyze_script(script)
        st.session_state.result = result.text
        cache.save_result(result.text)
    except (PromptError, GenerationError) as e:
        logger.error("Optimization failed", error=str(e))
        st.session_state.error = str(e) or "An unexpected error occurred."
    except StorageError as e:
        logger.warning("Could not cache result", error=str(e))
    finally:
        st.session_state.processing = False


def render_checklist(report):
    """Required sections with a status dot; grey until a result exists"""
    st.markdown("**Required sections**")
    columns = st.columns(2)
    for i, name in enumerate(config.validation.required_sections):
        if report is None:
            dot = "⚪"
        else:
            dot = "🟢" if report.checklist.get(name) else "🔴"
        columns[i % 2].markdown(f"{dot} {name}")


def render_section_card(section: Section, report: ResponseReport):
    with st.container(border=True):
        st.subheader(section.title)

        normalized = section.title.strip().lower()
        if normalized == TITLE_SECTION_TITLE:
            check = title_length(section, config.validation.max_title_length)
            if check.too_long:
                st.caption(f"Title length: :red[**{check.length}**] / {check.max_length} (trim recommended)")
            else:
                st.caption(f"Title length: {check.length} / {check.max_length}")

        if normalized == config.validation.metadata_section_title.strip().lower() and report.metadata.failed:
            st.caption(f":red[Metadata JSON check: {report.metadata.reason}]")

        # st.code provides the copy-to-clipboard button
        st.code(section.content, language=None, wrap_lines=True)


def render_result(result: str, report: ResponseReport):
    metadata_json = extract_metadata_json(report.sections, config.validation.metadata_section_title)

    col_md, col_json = st.columns(2)
    col_md.download_button(
        "Download .md",
        data=result,
        file_name=MARKDOWN_FILENAME,
        mime="text/markdown"
    )
    col_json.download_button(
        "Download metadata.json",
        data=metadata_json or "",
        file_name=METADATA_FILENAME,
        mime="application/json",
        disabled=metadata_json is None
    )

    with st.expander("Copy all as Markdown"):
        st.code(result, language="markdown")

    for section in report.sections:
        render_section_card(section, report)


def main():
    st.title("YouTube Content Optimizer (US)")

    result = st.session_state.result
    report = None
    if result:
        validation = config.validation
        report = build_report(
            result,
            validation.required_sections,
            schema=metadata_schema(),
            max_title_length=validation.max_title_length
        )

    left, right = st.columns(2)

    with left:
        header, clear = st.columns([4, 1])
        header.subheader("Video Script (Input in English)")
        clear.button("Clear", on_click=clear_all)

        st.text_area(
            "Video script",
            key="script",
            on_change=on_script_change,
            height=420,
            placeholder="Paste your English script here… (e.g., people-pleasing, boundaries, self-respect)",
            label_visibility="collapsed",
            disabled=st.session_state.processing
        )

        if st.button(
            "Optimize for YouTube SEO (US)",
            type="primary",
            use_container_width=True,
            disabled=st.session_state.processing or not st.session_state.script.strip()
        ):
            with st.spinner("Optimizing…"):
                run_optimization()
            st.rerun()

        render_checklist(report)

    with right:
        st.subheader("SEO Output (American English)")

        if st.session_state.error:
            st.error(st.session_state.error)

        if result and report is not None:
            render_result(result, report)
        elif not st.session_state.error:
            st.info("Your optimized YouTube SEO pack will appear here.")


main()
