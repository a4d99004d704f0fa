"""Configuration for term-bench.

Centralized settings via pydantic-settings. Suite files are parsed by
``term_bench.config.loader``, imported directly to keep the models and
config packages free of import cycles.
"""

from term_bench.config.exceptions import ConfigurationError, InvalidConfiguration
from term_bench.config.settings import (
    EmulatorSettings,
    GeneratorSettings,
    MeasurementSettings,
    SandboxSettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "ConfigurationError",
    "EmulatorSettings",
    "GeneratorSettings",
    "get_settings",
    "InvalidConfiguration",
    "MeasurementSettings",
    "SandboxSettings",
    "Settings",
    "StorageSettings",
]
