"""
Configuration management for opacity-tables.

This module provides:
- BakeConfig: Complete bake configuration with YAML/JSON loading
- DomainConfig, SpectralConfig, GasConfig, SystemConfig: its sections
"""

from opacity_tables.config.settings import (
    BakeConfig,
    DomainConfig,
    GasConfig,
    SpectralConfig,
    SystemConfig,
)

__all__ = [
    "BakeConfig",
    "DomainConfig",
    "GasConfig",
    "SpectralConfig",
    "SystemConfig",
]
