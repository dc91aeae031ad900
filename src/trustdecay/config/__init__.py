"""Configuration package - defaults and the SimulationConfig loader."""

from trustdecay.config.settings import ConfigError, SimulationConfig, load_config

__all__ = [
    "ConfigError",
    "SimulationConfig",
    "load_config",
]
