"""Entry point for running quantive_export as a module.

This allows running the application with:
    python -m quantive_export [COMMAND] [OPTIONS]
"""

from quantive_export.cli import app

if __name__ == "__main__":
    app()
