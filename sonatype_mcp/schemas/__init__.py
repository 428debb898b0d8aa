from .base import BaseSchema
from .tools import SupportZipConfig

__all__ = ["BaseSchema", "SupportZipConfig"]
