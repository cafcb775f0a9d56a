"""
Configuration module for the raster filter pipeline

Contains the constants and parameter ranges shared by every filter.
"""

from .processing_config import FilterConfig, DEFAULT_FILTER_CONFIG

__all__ = ['FilterConfig', 'DEFAULT_FILTER_CONFIG']
