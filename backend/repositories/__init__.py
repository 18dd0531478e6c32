from .authors import AuthorsRepository
from .books import BookJacketStore, BooksRepository
from .shelves import ShelvesRepository
from . import models

__all__ = ["AuthorsRepository", "BookJacketStore", "BooksRepository", "ShelvesRepository", "models"]
