"""Module: base schemas."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

# Required free text: surrounding whitespace is dropped before the length check.
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# JSON on the wire is camelCase; Python attributes stay snake_case.
class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
