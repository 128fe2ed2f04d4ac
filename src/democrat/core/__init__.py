from .http import HttpClient
from .utils import set_logging_level, truncate

__all__ = [
    "HttpClient",
    "set_logging_level",
    "truncate",
]
