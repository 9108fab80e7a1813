"""FDA 510(k) Review Studio - Main Application Entry Point.

Single-page Streamlit app. Every AI action goes through the session's
ActionGate, which spends mana, awards XP and records usage metrics.

Tabs:
- Summary Analysis: upload a 510(k) summary and analyze it
- Review Guidance: turn guidance text into a review checklist
- Submission Review: run a configured agent over submission text
- AI Note Keeper: organize, extract, explain and polish notes
- Configuration: edit agents.yaml and SKILL.md
- Dashboard: usage metrics for this session
"""

from __future__ import annotations

import streamlit as st

from review_studio.core.config import get_settings
from review_studio.core.constants import PREF_GEMINI_API_KEY, PREF_OPENAI_API_KEY, PREF_SELECTED_MODEL, PREF_THEME_ID
from review_studio.core.exceptions import AgentConfigError, DocumentError, UIError
from review_studio.core.logging import configure_logging, get_logger
from review_studio.engine.prompts import (
    GUIDANCE_TASK,
    NOTE_TASKS,
    SUMMARY_TASK,
    ReviewTask,
    build_agent_request,
    build_task_request,
)
from review_studio.ingestion.document_loader import SUPPORTED_SUFFIXES
from review_studio.models.agents import dump_agents_yaml, find_agent, load_agents_yaml
from review_studio.models.catalog import implemented_models, provider_for_model
from review_studio.ui.components import render_dashboard, render_output, render_status_hud
from review_studio.ui.state import (
    api_key_for,
    cached_document_text,
    get_context,
    get_output,
    get_preference,
    init_session_state,
    run_action,
    save_preference,
)
from review_studio.ui.theme import THEMES, apply_theme, get_theme, random_theme


settings = get_settings()
configure_logging(level=settings.log_level, json_format=settings.is_production)
logger = get_logger(__name__)

TAB_LABELS: dict[str, tuple[str, ...]] = {
    "en": (
        "📄 Summary Analysis",
        "📋 Review Guidance",
        "🔍 Submission Review",
        "📝 AI Note Keeper",
        "⚙️ Configuration",
        "📊 Dashboard",
    ),
    "zh": (
        "📄 摘要分析",
        "📋 审查指南",
        "🔍 提交审查",
        "📝 AI 笔记",
        "⚙️ 配置",
        "📊 仪表板",
    ),
}

UPLOAD_TYPES = sorted(suffix.lstrip(".") for suffix in SUPPORTED_SUFFIXES)


# =============================================================================
# Page Configuration
# =============================================================================


st.set_page_config(
    page_title=settings.ui.page_title,
    page_icon="🩺",
    layout="wide",
    initial_sidebar_state="expanded",
)

init_session_state()
apply_theme(get_theme(get_preference(PREF_THEME_ID)))


# =============================================================================
# Helpers
# =============================================================================


def read_upload(uploaded_file) -> str:
    """Extract text from an uploaded file, reporting failures in the UI."""
    if uploaded_file is None:
        return ""
    try:
        return cached_document_text(
            uploaded_file.name,
            uploaded_file.getvalue(),
            settings.ingestion.max_pdf_pages,
        )
    except DocumentError as exc:
        logger.warning("Upload rejected", filename=uploaded_file.name, error=exc.message)
        st.error(exc.message)
        return ""


def task_model(task: ReviewTask) -> str:
    """Model a preset task runs on, honoring the sidebar override."""
    if st.session_state.get("override_task_models"):
        return get_preference(PREF_SELECTED_MODEL)
    return task.model


def run_task(task: ReviewTask, content: str, output_key: str, *, keywords: str = "") -> None:
    """Run a preset task through the gate."""
    if not content.strip():
        st.warning("Please provide some text first.")
        return
    model = task_model(task)
    request = build_task_request(
        task,
        content,
        keywords=keywords,
        model=model,
        api_key=api_key_for(provider_for_model(model)),
    )
    run_action(request, output_key)


# =============================================================================
# Header & Sidebar
# =============================================================================


def render_header() -> None:
    """Render the title row with the painter theme controls."""
    title_col, theme_col, jackpot_col = st.columns([3, 2, 1])

    with title_col:
        st.markdown(f"# 🩺 {settings.app_name}")

    current = get_theme(get_preference(PREF_THEME_ID))
    theme_ids = [theme.id for theme in THEMES]

    with theme_col:
        selected = st.selectbox(
            "Painter Style",
            theme_ids,
            index=theme_ids.index(current.id),
            format_func=lambda theme_id: f"{get_theme(theme_id).painter} · {get_theme(theme_id).name}",
            label_visibility="collapsed",
        )
        if selected != current.id:
            save_preference(PREF_THEME_ID, selected)
            st.rerun()

    with jackpot_col:
        if st.button("🎰 Jackpot Style", use_container_width=True):
            save_preference(PREF_THEME_ID, random_theme(exclude=current.id).id)
            st.rerun()


def render_sidebar() -> None:
    """Render API key inputs and the model selector."""
    with st.sidebar:
        st.markdown("## 🔑 API Keys")
        if settings.ai.key_for("gemini"):
            st.caption("Gemini key loaded from environment.")
        else:
            gemini_key = st.text_input(
                "Gemini API Key",
                value=get_preference(PREF_GEMINI_API_KEY),
                type="password",
            )
            save_preference(PREF_GEMINI_API_KEY, gemini_key.strip())

        if settings.ai.key_for("openai"):
            st.caption("OpenAI key loaded from environment.")
        else:
            openai_key = st.text_input(
                "OpenAI API Key",
                value=get_preference(PREF_OPENAI_API_KEY),
                type="password",
            )
            save_preference(PREF_OPENAI_API_KEY, openai_key.strip())

        st.divider()
        st.markdown("## 🤖 Model")
        models = implemented_models()
        current_model = get_preference(PREF_SELECTED_MODEL)
        model = st.selectbox(
            "Default Model",
            models,
            index=models.index(current_model) if current_model in models else 0,
        )
        save_preference(PREF_SELECTED_MODEL, model)
        st.checkbox(
            "Use this model for preset tasks",
            key="override_task_models",
            help="By default each preset task runs on its own model.",
        )

        st.divider()
        st.caption(f"v{settings.app_version}")


# =============================================================================
# Tabs
# =============================================================================


def render_summary_tab() -> None:
    st.markdown("### 510(k) Summary Analysis")
    uploaded = st.file_uploader("Upload 510(k) summary", type=UPLOAD_TYPES, key="summary_upload")
    uploaded_text = read_upload(uploaded)
    content = st.text_area(
        "Or paste the summary text",
        value=uploaded_text,
        height=240,
    )
    if st.button(f"✨ {SUMMARY_TASK.label}", key="run_summary"):
        run_task(SUMMARY_TASK, content, "summary")
    render_output(get_output("summary"))


def render_guidance_tab() -> None:
    st.markdown("### Review Guidance")
    content = st.text_area("Paste FDA guidance text", height=240, key="guidance_input")
    if st.button(f"✅ {GUIDANCE_TASK.label}", key="run_guidance"):
        run_task(GUIDANCE_TASK, content, "guidance")
    render_output(get_output("guidance"))


def render_submission_tab() -> None:
    st.markdown("### Submission Review")
    uploaded = st.file_uploader("Upload submission material", type=UPLOAD_TYPES, key="submission_upload")
    uploaded_text = read_upload(uploaded)
    content = st.text_area(
        "Submission text",
        value=uploaded_text,
        height=240,
    )

    agents = st.session_state.agents
    if not agents:
        st.info("No agents configured. Add some in the Configuration tab.")
        return

    agent_ids = [agent.id for agent in agents]
    agent_id = st.selectbox(
        "Agent",
        agent_ids,
        format_func=lambda value: find_agent(agents, value).label,
        key="submission_agent",
    )
    agent = find_agent(agents, agent_id)
    if agent.description:
        st.caption(agent.description)

    if st.button("🚀 Execute Agent", key="run_agent"):
        if not content.strip():
            st.warning("Please provide some text first.")
        else:
            request = build_agent_request(agent, content, api_key=api_key_for(agent.provider))
            run_action(request, "submission")
    render_output(get_output("submission"))


def render_notes_tab() -> None:
    st.markdown("### AI Note Keeper")
    content = st.text_area("Your notes", height=240, key="notes_input")
    keywords = st.text_input(
        "Keywords to highlight (comma separated)",
        value="Predicate, Indication, SE",
        key="notes_keywords",
    )

    columns = st.columns(len(NOTE_TASKS))
    for column, task in zip(columns, NOTE_TASKS):
        with column:
            if st.button(task.label, key=f"run_{task.id}", use_container_width=True):
                run_task(task, content, "notes", keywords=keywords)
    render_output(get_output("notes"))


def render_config_tab() -> None:
    st.markdown("### Configuration")
    agents_col, skill_col = st.columns(2)

    with agents_col:
        st.markdown("#### agents.yaml")
        agents_yaml = st.text_area("agents.yaml", key="agents_yaml", height=320, label_visibility="collapsed")
        if st.button("Apply Agents", key="apply_agents"):
            try:
                st.session_state.agents = load_agents_yaml(agents_yaml)
            except AgentConfigError as exc:
                st.error(exc.message)
            else:
                st.success(f"Loaded {len(st.session_state.agents)} agents.")
        st.download_button(
            "⬇️ Download agents.yaml",
            data=dump_agents_yaml(st.session_state.agents),
            file_name="agents.yaml",
            mime="text/yaml",
        )

    with skill_col:
        st.markdown("#### SKILL.md")
        skill_md = st.text_area("SKILL.md", key="skill_md", height=320, label_visibility="collapsed")
        st.download_button(
            "⬇️ Download SKILL.md",
            data=skill_md,
            file_name="SKILL.md",
            mime="text/markdown",
        )


def render_dashboard_tab() -> None:
    st.markdown("### Dashboard")
    try:
        render_dashboard(get_context().metrics, st.session_state.run_history)
    except UIError as exc:
        st.error(exc.message)


# =============================================================================
# Main
# =============================================================================


def main() -> None:
    """Render the studio."""
    render_header()
    render_sidebar()
    render_status_hud(get_context().resources, xp_per_level=settings.gate.xp_per_level)
    st.divider()

    labels = TAB_LABELS.get(settings.ui.language, TAB_LABELS["en"])
    renderers = (
        render_summary_tab,
        render_guidance_tab,
        render_submission_tab,
        render_notes_tab,
        render_config_tab,
        render_dashboard_tab,
    )
    for tab, render in zip(st.tabs(list(labels)), renderers):
        with tab:
            render()


main()
