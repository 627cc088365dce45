# Database models package
from dialtester.models.database.sessions import DialSession
from dialtester.models.database.data_points import DataPoint, MIN_VALUE, MAX_VALUE

__all__ = [
    "DialSession",
    "DataPoint",
    "MIN_VALUE",
    "MAX_VALUE",
]
