"""
main.py
-------
Entry point for the implicit-conversion demo.

Responsibilities:
    - Configure logging and read the connection string.
    - Build the entity mapping once and hand it to the data context.
    - Run GetBadType then GetGoodType; failures propagate to the interpreter.
"""

from config import load_connection_settings
from db.context import ImplicitConversionContext
from db.model_config import build_mapping
from services.demo_service import Demo, Runnable
from utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def main() -> None:
    """Run the demo against the configured SQL Server database."""

    # ── 1. Configuration ──────────────────────────────────
    configure_logging()
    settings = load_connection_settings()
    mapping = build_mapping()

    # ── 2. Run both queries over one scoped connection ────
    with ImplicitConversionContext(settings, mapping) as context:
        demo: Runnable = Demo(context)
        demo.run()

    logger.info("Demo finished.")


if __name__ == "__main__":
    main()
