"""
Constants for the alert fetch cycle.
"""

from pathlib import Path

MODULE_ROOT = Path(__file__).parent

DEFAULT_CONFIG_PATH = MODULE_ROOT / "data" / "alerts.yaml"

# Longer bodies are cut off in the alert text
MAX_ALERT_BODY_CHARS = 500
