"""
Project path resolution.

Usage:
    from wrongway.common.path import PROJECT_ROOT, CONFIGS_DIR
"""

from pathlib import Path
import os


def get_project_root() -> Path:
    """
    Resolve project root directory (where .env lives).

    Priority:
        1. WRONGWAY_ROOT environment variable (if set)
        2. Walk up from this file: src/wrongway/common/path.py -> common -> wrongway -> src -> project
    """
    env_root = os.environ.get("WRONGWAY_ROOT")
    if env_root:
        return Path(env_root).resolve()

    return Path(__file__).resolve().parents[3]


def get_default_config_path() -> Path:
    """
    Resolve the YAML config file.

    WRONGWAY_CONFIG wins; otherwise the default.yaml shipped inside the package.
    """
    env_path = os.environ.get("WRONGWAY_CONFIG")
    if env_path:
        return Path(env_path).resolve()
    return CONFIGS_DIR / "default.yaml"


PROJECT_ROOT = get_project_root()

PACKAGE_DIR = Path(__file__).resolve().parents[1]
CONFIGS_DIR = PACKAGE_DIR / "configs"
