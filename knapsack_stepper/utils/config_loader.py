# knapsack_stepper/utils/config_loader.py
import yaml
import os
from types import SimpleNamespace
from typing import Dict, Any

PACKAGE_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
DEFAULT_CONFIG_PATH = os.path.join(PACKAGE_ROOT, 'configs', 'config.yaml')


def _post_process_config(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Processes the raw config dict to add dynamic values and absolute paths.
    This function contains all logic that cannot be represented in a static YAML file.
    """
    # --- 1. Build absolute paths relative to the current working directory ---
    for key, rel_path in config_dict['paths'].items():
        config_dict['paths'][key] = os.path.abspath(rel_path)

    # --- 2. Validate auto-play speed bounds ---
    autoplay_cfg = config_dict['autoplay']
    if autoplay_cfg['min_speed_ms'] <= 0 or autoplay_cfg['min_speed_ms'] > autoplay_cfg['max_speed_ms']:
        raise ValueError(
            f"Invalid auto-play bounds: min_speed_ms={autoplay_cfg['min_speed_ms']}, "
            f"max_speed_ms={autoplay_cfg['max_speed_ms']}."
        )
    if not (autoplay_cfg['min_speed_ms'] <= autoplay_cfg['speed_ms'] <= autoplay_cfg['max_speed_ms']):
        raise ValueError(f"Default speed_ms={autoplay_cfg['speed_ms']} lies outside the configured bounds.")

    # --- 3. Normalize the verification size range to a tuple ---
    config_dict['verification']['n_range'] = tuple(config_dict['verification']['n_range'])

    return config_dict


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> SimpleNamespace:
    """
    Loads, processes, and returns the project configuration from a YAML file
    as a SimpleNamespace object for dot notation access.

    List entries (e.g. the default items) are kept as plain lists of dicts.
    """
    try:
        with open(config_path, 'r') as f:
            config_dict = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found at: {config_path}")

    processed_config = _post_process_config(config_dict)

    def dict_to_namespace(d: Dict) -> SimpleNamespace:
        for k, v in d.items():
            if isinstance(v, dict):
                d[k] = dict_to_namespace(v)
        return SimpleNamespace(**d)

    return dict_to_namespace(processed_config)

# --- Create a single, global config instance for easy import across the project ---
# Other modules can simply use: from knapsack_stepper.utils.config_loader import cfg
cfg = load_config()
