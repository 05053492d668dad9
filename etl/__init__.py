"""
ETL package: keeps the local catalog fed from TMDb
"""
from .scheduler import ImportScheduler
from .trending_import import TrendingImportService

__all__ = ['ImportScheduler', 'TrendingImportService']
