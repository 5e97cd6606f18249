from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case в коде, camelCase на проводе."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
