# runegather/models/__init__.py
from .element import Element
from .resource import Resource

__all__ = ["Element", "Resource"]
