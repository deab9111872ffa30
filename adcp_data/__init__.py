"""
DATA module - fixed tables used by the ADCP deployment predictor.
"""

from .data_provider import DataProvider

__all__ = [
    'DataProvider',
]
