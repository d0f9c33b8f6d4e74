"""
Config package for maskview.

Responsible for:
- the loader options model (LoaderConfig)
- reading those options from JSON files or the environment
"""

from .model import LoaderConfig, load_config

__all__ = ["LoaderConfig", "load_config"]
