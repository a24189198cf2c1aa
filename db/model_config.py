"""
db/model_config.py
------------------
Mapping declarations for the demo tables.

Both tables hold a VARCHAR column. Only GoodType says so explicitly;
BadType is left to the default inference, which maps str to NVARCHAR.
"""

from db.mapping import EntityTypeBuilder, MappingConfiguration, ModelBuilder
from models.bad_type import BadType
from models.good_type import GoodType


def configure_bad_type(builder: EntityTypeBuilder) -> None:
    builder.to_table("BadType")


def configure_good_type(builder: EntityTypeBuilder) -> None:
    builder.to_table("GoodType")
    builder.property("some_nvarchar").has_column_name("SomeNVarchar").is_unicode(False)


def build_mapping() -> MappingConfiguration:
    """Build the mapping for both demo entities. Call once at startup."""
    return (
        ModelBuilder()
        .apply_configuration(BadType, configure_bad_type)
        .apply_configuration(GoodType, configure_good_type)
        .build()
    )
