"""
Common schema base.

The admin UI speaks camelCase JSON; Python code uses snake_case.
The alias generator bridges the two, and populate_by_name lets
services build schemas with the Python names.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }
