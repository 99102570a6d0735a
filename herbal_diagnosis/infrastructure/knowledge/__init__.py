"""Knowledge corpus (packaged JSON sources + store)"""

from .sources import HerbalKnowledgeSource, RecipeSource, SymptomSource, default_sources
from .store import KnowledgeStore

__all__ = [
    "HerbalKnowledgeSource",
    "RecipeSource",
    "SymptomSource",
    "default_sources",
    "KnowledgeStore",
]
