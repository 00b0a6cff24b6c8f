"""
Common/Shared Pydantic schemas
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Wire format is camelCase, Python attributes stay snake_case
CamelConfig = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
)


class CamelModel(BaseModel):
    """Base for request/response bodies exchanged with the blog front end"""

    model_config = CamelConfig

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    current_page: int
    per_page: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool
