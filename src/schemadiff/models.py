"""
Pydantic models for schema snapshots.

A snapshot is the JSON document the extraction front end writes for one build
of the persistence layer. Field aliases follow that document's camelCase
names so snapshots can be validated directly with ``SchemaModel.model_validate``.
Models are frozen: the diff engine only ever reads them.
"""

from enum import StrEnum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class TableType(StrEnum):
    """Kind of physical table an entity maps to"""

    ENTITY = "ENTITY"
    JOIN_TABLE = "JOIN_TABLE"
    COLLECTION_TABLE = "COLLECTION_TABLE"


class FetchType(StrEnum):
    EAGER = "EAGER"
    LAZY = "LAZY"


class GenerationStrategy(StrEnum):
    """Primary key value generation"""

    NONE = "NONE"
    AUTO = "AUTO"
    IDENTITY = "IDENTITY"
    SEQUENCE = "SEQUENCE"
    TABLE = "TABLE"
    UUID = "UUID"


class TemporalType(StrEnum):
    DATE = "DATE"
    TIME = "TIME"
    TIMESTAMP = "TIMESTAMP"


class ConstraintType(StrEnum):
    PRIMARY_KEY = "PRIMARY_KEY"
    UNIQUE = "UNIQUE"
    FOREIGN_KEY = "FOREIGN_KEY"
    CHECK = "CHECK"
    DEFAULT = "DEFAULT"
    INDEX = "INDEX"
    NOT_NULL = "NOT_NULL"
    AUTO = "AUTO"


class RelationshipType(StrEnum):
    """Association kind of a relationship"""

    MANY_TO_ONE = "MANY_TO_ONE"
    ONE_TO_MANY = "ONE_TO_MANY"
    ONE_TO_ONE = "ONE_TO_ONE"
    MANY_TO_MANY = "MANY_TO_MANY"
    JOINED_INHERITANCE = "JOINED_INHERITANCE"
    SECONDARY_TABLE = "SECONDARY_TABLE"
    ELEMENT_COLLECTION = "ELEMENT_COLLECTION"


class ReferentialAction(StrEnum):
    """ON DELETE / ON UPDATE action of a foreign key"""

    NO_ACTION = "NO_ACTION"
    CASCADE = "CASCADE"
    RESTRICT = "RESTRICT"
    SET_NULL = "SET_NULL"
    SET_DEFAULT = "SET_DEFAULT"


class CascadeType(StrEnum):
    ALL = "ALL"
    PERSIST = "PERSIST"
    MERGE = "MERGE"
    REMOVE = "REMOVE"
    REFRESH = "REFRESH"
    DETACH = "DETACH"


class ColumnModel(BaseModel):
    """Column definition as seen by the ORM mapping"""

    table_name: str = Field("", alias="tableName")
    column_name: str = Field(..., alias="columnName")
    java_type: Optional[str] = Field(None, alias="javaType")
    primary_key: bool = Field(False, alias="primaryKey")
    nullable: bool = True
    length: int = 255
    precision: int = 0
    scale: int = 0
    default_value: Optional[str] = Field(None, alias="defaultValue")
    comment: Optional[str] = None
    enum_values: List[str] = Field(default_factory=list, alias="enumValues")
    enum_string_mapping: bool = Field(False, alias="enumStringMapping")
    temporal_type: Optional[TemporalType] = Field(None, alias="temporalType")
    lob: bool = False
    generation_strategy: GenerationStrategy = Field(
        GenerationStrategy.NONE, alias="generationStrategy"
    )
    sequence_name: Optional[str] = Field(None, alias="sequenceName")
    table_generator_name: Optional[str] = Field(None, alias="tableGeneratorName")
    conversion_class: Optional[str] = Field(None, alias="conversionClass")
    fetch_type: FetchType = Field(FetchType.EAGER, alias="fetchType")
    map_key: bool = Field(False, alias="mapKey")
    map_key_type: Optional[str] = Field(None, alias="mapKeyType")
    version: bool = False
    sql_type_override: Optional[str] = Field(None, alias="sqlTypeOverride")

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def is_enum(self) -> bool:
        return bool(self.enum_values)


class ConstraintModel(BaseModel):
    """Table constraint (PRIMARY KEY, UNIQUE, CHECK, ...)"""

    name: Optional[str] = None
    schema_name: Optional[str] = Field(None, alias="schema")
    table_name: Optional[str] = Field(None, alias="tableName")
    type: ConstraintType
    columns: List[str] = Field(default_factory=list)  # display order only

    # For FOREIGN KEY
    referenced_table: Optional[str] = Field(None, alias="referencedTable")
    referenced_columns: List[str] = Field(default_factory=list, alias="referencedColumns")
    on_delete: Optional[ReferentialAction] = Field(None, alias="onDelete")
    on_update: Optional[ReferentialAction] = Field(None, alias="onUpdate")

    # For CHECK / partial constraints
    check_clause: Optional[str] = Field(None, alias="checkClause")
    where: Optional[str] = None
    options: Optional[str] = None

    class Config:
        populate_by_name = True
        frozen = True


class IndexModel(BaseModel):
    """Index definition; column order is the physical key order"""

    index_name: str = Field(..., alias="indexName")
    table_name: Optional[str] = Field(None, alias="tableName")
    column_names: List[str] = Field(default_factory=list, alias="columnNames")
    unique: bool = False

    class Config:
        populate_by_name = True
        frozen = True


class RelationshipModel(BaseModel):
    """Foreign-key backed association between two tables"""

    type: Optional[RelationshipType] = None
    table_name: Optional[str] = Field(None, alias="tableName")  # table holding the FK
    columns: List[str] = Field(default_factory=list)
    referenced_table: Optional[str] = Field(None, alias="referencedTable")
    referenced_columns: List[str] = Field(default_factory=list, alias="referencedColumns")
    constraint_name: Optional[str] = Field(None, alias="constraintName")
    source_attribute_name: Optional[str] = Field(None, alias="sourceAttributeName")
    fetch_type: FetchType = Field(FetchType.LAZY, alias="fetchType")
    cascade_types: List[CascadeType] = Field(default_factory=list, alias="cascadeTypes")
    orphan_removal: bool = Field(False, alias="orphanRemoval")
    maps_id: bool = Field(False, alias="mapsId")
    maps_id_key_path: Optional[str] = Field(None, alias="mapsIdKeyPath")
    maps_id_bindings: Dict[str, str] = Field(default_factory=dict, alias="mapsIdBindings")
    on_delete: Optional[ReferentialAction] = Field(None, alias="onDelete")
    on_update: Optional[ReferentialAction] = Field(None, alias="onUpdate")
    no_constraint: bool = Field(False, alias="noConstraint")

    class Config:
        populate_by_name = True
        frozen = True


class SecondaryTableModel(BaseModel):
    name: str
    schema_name: Optional[str] = Field(None, alias="schema")
    catalog: Optional[str] = None

    class Config:
        populate_by_name = True
        frozen = True


class EntityModel(BaseModel):
    """Mapped entity with its table-level metadata"""

    entity_name: str = Field(..., alias="entityName")
    table_name: str = Field(..., alias="tableName")
    schema_name: Optional[str] = Field(None, alias="schema")
    catalog: Optional[str] = None
    comment: Optional[str] = None
    inheritance: Optional[str] = None
    parent_entity: Optional[str] = Field(None, alias="parentEntity")
    table_type: TableType = Field(TableType.ENTITY, alias="tableType")
    columns: Dict[str, ColumnModel] = Field(default_factory=dict)
    constraints: Dict[str, ConstraintModel] = Field(default_factory=dict)
    indexes: Dict[str, IndexModel] = Field(default_factory=dict)
    relationships: Dict[str, RelationshipModel] = Field(default_factory=dict)
    secondary_tables: List[SecondaryTableModel] = Field(
        default_factory=list, alias="secondaryTables"
    )

    class Config:
        populate_by_name = True
        frozen = True

    def owns_table(self, table_name: Optional[str]) -> bool:
        """Check a column's declared table against this entity

        An empty table name stands for the primary table.
        """
        if not table_name or not table_name.strip():
            return True
        if table_name.lower() == self.table_name.lower():
            return True
        return any(st.name.lower() == table_name.lower() for st in self.secondary_tables)


class SequenceModel(BaseModel):
    name: str
    schema_name: Optional[str] = Field(None, alias="schema")
    catalog: Optional[str] = None
    initial_value: int = Field(1, alias="initialValue")
    allocation_size: int = Field(50, alias="allocationSize")
    cache: int = 0
    min_value: int = Field(0, alias="minValue")
    max_value: int = Field(0, alias="maxValue")

    class Config:
        populate_by_name = True
        frozen = True


class TableGeneratorModel(BaseModel):
    name: str
    table: Optional[str] = None
    schema_name: Optional[str] = Field(None, alias="schema")
    catalog: Optional[str] = None
    pk_column_name: Optional[str] = Field(None, alias="pkColumnName")
    value_column_name: Optional[str] = Field(None, alias="valueColumnName")
    pk_column_value: Optional[str] = Field(None, alias="pkColumnValue")
    initial_value: int = Field(0, alias="initialValue")
    allocation_size: int = Field(50, alias="allocationSize")

    class Config:
        populate_by_name = True
        frozen = True


class SchemaModel(BaseModel):
    """One snapshot of the whole persistence schema"""

    version: Optional[str] = None
    entities: Dict[str, EntityModel] = Field(default_factory=dict)
    sequences: Dict[str, SequenceModel] = Field(default_factory=dict)
    table_generators: Dict[str, TableGeneratorModel] = Field(
        default_factory=dict, alias="tableGenerators"
    )

    class Config:
        populate_by_name = True
        frozen = True
