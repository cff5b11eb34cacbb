"""
Shared utilities for the joke service.

Submodules:
    path     - Project path resolution (PROJECT_ROOT, CONFIGS_DIR)
    io       - JSON / JSONL / CSV request files
    logging  - Standard logger setup
    config   - .env and YAML config loading, Settings
"""
