# Repositories package init
"""
Termbook Backend: Repository Layer
====================================

What:  Query construction over the relational schema.
How:   Repositories accept an AsyncSession and return plain dataclass records,
       so services never build SQLAlchemy statements themselves.

Repository Inventory:
    - DefinitionRepository: definitions joined to users, categories and
      status_definitions
"""
