from .schema_builders import (
    column,
    constraint,
    entity,
    id_column,
    index,
    relationship,
    schema,
    user_entity,
)

__all__ = [
    "column",
    "constraint",
    "entity",
    "id_column",
    "index",
    "relationship",
    "schema",
    "user_entity",
]
