# Models package init
"""
ORM models. Importing the package registers every table with Base.metadata,
which Alembic and the foreign keys between tables rely on.
"""

from quoteable.models.person import Person
from quoteable.models.quote import Quote
from quoteable.models.image import GeneratedImage, Image

__all__ = ["Person", "Quote", "Image", "GeneratedImage"]
