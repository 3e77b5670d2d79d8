"""Configuration management for the N-Queens trace tooling.

This module provides a thin, explicit wrapper around a JSON configuration file
to centralize visualizer defaults and benchmark settings.

File format (high-level)
------------------------
- visualizer_settings: default N, strategy, attempt emission, playback delay
  and the largest board for which a full trace is built.
- benchmark_settings: N values, strategies, runs per size, output directory
  and worker count.

All methods return Python native types; the class does not validate semantics
beyond presence of keys to keep responsibilities minimal.
"""
import json
from pathlib import Path


class ConfigManager:
    """Load, query, and persist configuration.

    Parameters
    ----------
    config_path : str | os.PathLike, default "config.json"
        Path to the configuration file.
    """

    def __init__(self, config_path="config.json"):
        self.config_path = Path(config_path)
        self.config = self.load_config()

    def load_config(self):
        """Load and parse the JSON configuration file.

        Returns
        -------
        dict
            Root configuration object.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}\n"
                f"Create it or use the default config.json template"
            )

        with open(self.config_path, 'r') as f:
            return json.load(f)

    def save_config(self):
        """Persist the current in-memory configuration to disk."""
        with open(self.config_path, 'w') as f:
            json.dump(self.config, f, indent=2)

    def get_visualizer_settings(self):
        """Return trace and playback defaults (N, strategy, attempts, delay)."""
        return self.config.get("visualizer_settings", {})

    def get_benchmark_settings(self):
        """Return benchmark settings (sizes, strategies, runs, output dir)."""
        return self.config.get("benchmark_settings", {})

    def get_strategies(self):
        """Return the strategy labels to benchmark."""
        return self.get_benchmark_settings().get("strategies", ["array", "bitmask"])

    def update_setting(self, section, key, value):
        """Update a specific setting and persist the change immediately."""
        if section not in self.config:
            self.config[section] = {}
        self.config[section][key] = value
        self.save_config()
