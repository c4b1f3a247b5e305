"""
Config Loader
Loads localnet configuration from JSON with .env overrides
"""

import os
import copy
import json
from typing import Dict
from loguru import logger
from dotenv import load_dotenv

load_dotenv()


DEFAULT_CONFIG_PATH = 'config/localnet_config.json'

DEFAULT_CONFIG = {
    'container': {
        'name': 'stellar',
        'image': 'stellar/quickstart:testing',
        'port': 8000,
        'args': ['--local', '--enable-soroban-rpc']
    },
    'network': {
        'name': 'local',
        'rpc_url': 'http://localhost:8000/soroban/rpc',
        'passphrase': 'Standalone Network ; February 2017'
    },
    'identity': {
        'name': 'local-deployer'
    },
    'horizon': {
        'url': 'http://localhost:8000',
        'request_timeout_s': 5
    },
    'gate': {
        'poll_interval_s': 1.0,
        'startup_floor': 0,
        'retry_ladder': [10, 20, 30],
        'startup_timeout_s': None
    },
    'deploy': {
        'wasm_dir': 'target/wasm32-unknown-unknown/release',
        'default_contract': 'dex_market'
    }
}

# env var -> (section, key, type)
ENV_OVERRIDES = {
    'LOCALNET_HORIZON_URL': ('horizon', 'url', str),
    'LOCALNET_RPC_URL': ('network', 'rpc_url', str),
    'LOCALNET_NETWORK': ('network', 'name', str),
    'LOCALNET_IDENTITY': ('identity', 'name', str),
    'LOCALNET_CONTAINER_IMAGE': ('container', 'image', str),
    'LOCALNET_WASM_DIR': ('deploy', 'wasm_dir', str),
    'LOCALNET_POLL_INTERVAL': ('gate', 'poll_interval_s', float),
    'LOCALNET_STARTUP_TIMEOUT': ('gate', 'startup_timeout_s', float)
}


def _merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into a copy of base"""
    merged = copy.deepcopy(base)

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value

    return merged


def load_config(path: str = DEFAULT_CONFIG_PATH) -> Dict:
    """
    Load localnet configuration

    Built-in defaults, then the JSON file (if present), then
    LOCALNET_* environment variables.

    Args:
        path: Path to JSON config file

    Returns:
        Merged configuration dict
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if os.path.exists(path):
        with open(path, 'r') as f:
            try:
                file_config = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid config file {path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ValueError(f"Invalid config file {path}: expected a JSON object")

        config = _merge(config, file_config)
        logger.debug(f"Loaded config from {path}")
    else:
        logger.debug(f"Config file {path} not found, using defaults")

    for env_var, (section, key, cast) in ENV_OVERRIDES.items():
        raw = os.getenv(env_var)
        if raw is None or raw == '':
            continue

        try:
            config[section][key] = cast(raw)
        except ValueError:
            raise ValueError(f"Invalid value for {env_var}: {raw!r}")

        logger.debug(f"{env_var} overrides {section}.{key}")

    return config
