"""
Where: bridge/runtime/core/logging_config.py
What: Point logging setup at the packaged JSON-to-stdout config.
Why: Lambda forwards stdout to CloudWatch Logs; LOG_CONFIG_PATH can replace the file.
"""

from pathlib import Path
from typing import Optional

from bridge.common.core.logging_config import setup_logging as common_setup_logging

DEFAULT_LOG_CONFIG_PATH = Path(__file__).resolve().parent.parent / "resources" / "logging.yml"


def setup_logging(config_path: str = "", log_level: Optional[str] = None) -> None:
    """
    Load the YAML config and initialize logging.
    An explicit LOG_CONFIG_PATH wins over the packaged JSON-to-stdout config.
    """
    common_setup_logging(config_path or str(DEFAULT_LOG_CONFIG_PATH), log_level)
