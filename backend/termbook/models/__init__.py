# Models package init: importing here registers every table with Base.metadata
from termbook.models.category import Category
from termbook.models.definition import Definition
from termbook.models.status_definition import DefinitionStatus, StatusDefinition
from termbook.models.user import User

__all__ = [
    "Category",
    "Definition",
    "DefinitionStatus",
    "StatusDefinition",
    "User",
]
