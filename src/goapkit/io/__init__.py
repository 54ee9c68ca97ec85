"""Input/output helpers for goapkit."""

from .config import load_config
from .domain import DomainSpec, load_domain
from .logging import StructuredLogger

__all__ = ["DomainSpec", "StructuredLogger", "load_config", "load_domain"]
