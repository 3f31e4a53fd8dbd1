"""Wiki value objects consumed by the page sources."""

from .language import Language
from .title import WikiTitle

__all__ = ["Language", "WikiTitle"]
