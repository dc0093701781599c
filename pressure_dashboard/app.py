"""
================================================================================
Application Entry Point
================================================================================

This module provides the main entry point for the Pressure Monitoring
Dashboard.

Usage:
    python -m pressure_dashboard.app
    python -m pressure_dashboard.app --patient-email jason.ghanian@patient.demo
    python -m pressure_dashboard.app --config my_config.json

Or:
    from pressure_dashboard.app import main
    main()

Design Philosophy:
    "The people who are crazy enough to think they can change the world
     are the ones who do." - Steve Jobs
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from PyQt6.QtWidgets import QApplication
from PyQt6.QtGui import QFont

from .config import MonitorConfig, get_default_config
from .core import PatientIndex, SessionStore, NotesStore, JsonFileStore, create_source
from .errors import DashboardError
from .main_window import DashboardWindow
from .styles.theme import FONT_NAME

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pressure monitoring dashboard")
    parser.add_argument("--config", type=Path, default=None,
                        help="Path to a JSON config file")
    parser.add_argument("--patient-email", default=None,
                        help="Open the patient view for this email")
    parser.add_argument("--demo", action="store_true",
                        help="Use generated demo data instead of recordings")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def build_index(config: MonitorConfig) -> PatientIndex:
    """Patient directory from the config, or the bundled demo directory."""
    if config.patient_index_path:
        return PatientIndex.load(config.patient_index_path)
    return PatientIndex.default_index()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Launch the dashboard.

    Returns:
        Exit code (0 for success)

    Example:
        >>> import sys
        >>> sys.exit(main())
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = get_default_config(args.config)
    if args.demo:
        config = replace(config, data_dir="", base_url="")

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error("Config: %s", error)
        return 2

    try:
        index = build_index(config)
    except (OSError, ValueError) as e:
        logger.error("Could not load patient index: %s", e)
        return 2

    patient_id = None
    if args.patient_email:
        patient_id = index.find_patient_id_by_email(args.patient_email)
        if patient_id is None:
            logger.error("No patient registered for %s", args.patient_email)
            return 1

    store = SessionStore(index, create_source(config), config)
    notes = NotesStore(JsonFileStore(config.notes_path), config.notes_key)

    app = QApplication(sys.argv[:1])
    app.setStyle('Fusion')
    app.setFont(QFont(FONT_NAME, 10))

    try:
        window = DashboardWindow(config, index, store, notes, patient_id=patient_id)
    except DashboardError as e:
        logger.error("Could not start dashboard: %s", e)
        return 1
    window.show()

    logger.info("Dashboard started with %d patients", len(index))
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
