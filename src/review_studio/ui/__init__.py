"""UI module for the FDA 510(k) Review Studio.

Submodules:
    app: Main Streamlit application
    components: HUD, dashboard and output panels
    state: Session state wiring and gated actions
    theme: Painter palettes and CSS

Usage:
    Run the application with:
        streamlit run src/review_studio/ui/app.py

    Or from the installed entry point:
        review-studio
"""

from __future__ import annotations


def run_app() -> None:
    """Run the Streamlit application.

    This launches a subprocess running streamlit.
    """
    import subprocess
    import sys
    from pathlib import Path

    app_path = Path(__file__).parent / "app.py"
    subprocess.run([sys.executable, "-m", "streamlit", "run", str(app_path)], check=False)


__all__ = [
    "run_app",
]
