"""camelCase base schemas.

Python code stays snake_case; JSON on the wire is camelCase
(``is_blocked`` <-> ``isBlocked``). Request bodies accept either form.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request bodies and plain response payloads."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CamelORMModel(CamelModel):
    """Responses built from SQLAlchemy rows."""
    model_config = ConfigDict(from_attributes=True)
