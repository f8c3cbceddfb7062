import json
import os
from datetime import datetime

DEFAULT_CONFIG = {
    "rules_file": "rules.txt",
    "initial_state": "A",
    "initial_tape": "0,1,0,0",
    "max_steps": 0,
    "log_steps": True,
    "show_tape": False,
    "write_log": False,
    "output_directory": "logs/",
    "log_file_prefix": "turing_",
}

# Expected types for validation
CONFIG_SCHEMA = {
    "rules_file": str,
    "initial_state": str,
    "initial_tape": str,
    "max_steps": int,
    "log_steps": bool,
    "show_tape": bool,
    "write_log": bool,
    "output_directory": str,
    "log_file_prefix": str,
}


def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        value = config[key]
        # bool is an int subclass; don't let True pass as a step count
        if not isinstance(value, expected_type) or (expected_type is int and isinstance(value, bool)):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(value)}.")

    if config["max_steps"] < 0:
        raise ValueError("max_steps must be >= 0 (0 means no limit).")


def load_config(path=None, verbose=False):
    config = DEFAULT_CONFIG.copy()

    if path is not None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file not found at: {path}")

        with open(path, "r", encoding="utf-8") as f:
            user_config = json.load(f)

        # Merge defaults with overrides
        config.update(user_config)

    validate_config(config)

    if config["write_log"]:
        os.makedirs(config["output_directory"], exist_ok=True)

    if verbose:
        print(f"[{datetime.now()}] Loaded config:")
        for key, value in config.items():
            print(f"  {key}: {value}")

    return config
