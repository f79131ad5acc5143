import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = ".cleantrack.yml"

DEFAULT_CONFIG: dict = {
    "store": "memory",  # memory | sqlite | gist
    "store_path": ".cleantrack.db",
    "gist_id": None,
    "cloudinary_cloud_name": None,
    "cloudinary_upload_preset": "cleantrack_uploads",
    "upload_folder": "cleantrack",
    "upload_retries": 3,
    "user_id": None,
    "user_name": None,
    "user_email": None,
    "role": "user",
}

# Environment variables win over the config file but lose to CLI flags.
_ENV_OVERRIDES = {
    "cloudinary_cloud_name": "CLOUDINARY_CLOUD_NAME",
    "cloudinary_upload_preset": "CLOUDINARY_UPLOAD_PRESET",
    "user_id": "CLEANTRACK_USER_ID",
    "user_name": "CLEANTRACK_USER_NAME",
    "user_email": "CLEANTRACK_USER_EMAIL",
    "role": "CLEANTRACK_ROLE",
}


def load_config(config_path: str = DEFAULT_CONFIG_PATH, cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .cleantrack.yml in the current directory
      3. Environment variables
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    for key, env_var in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Credentials are never read from the config file.
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def write_config(config: dict, config_path: str = DEFAULT_CONFIG_PATH) -> None:
    """Write or update the config file, preserving any existing keys."""
    path = Path(config_path)
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))
