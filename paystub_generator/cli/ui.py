"""
CLI Entry Point: paystub-ui

Launches the Streamlit stub editor.
"""

import sys
from pathlib import Path

from streamlit.web import cli as stcli


def main() -> None:
    # paystub_generator/cli/ui.py -> paystub_generator/ui/app.py
    package_root = Path(__file__).resolve().parent.parent
    app_path = package_root / "ui" / "app.py"

    if not app_path.exists():
        print(f"Error: Could not find UI entry point at {app_path}", file=sys.stderr)
        sys.exit(1)

    # Remaining arguments are passed through to streamlit.
    sys.argv = ["streamlit", "run", str(app_path)] + sys.argv[1:]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
