from .base import DataSource
from .rest import RestDataSource

__all__ = [
    "DataSource",
    "RestDataSource",
]
