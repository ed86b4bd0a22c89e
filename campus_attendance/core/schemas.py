from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for payloads exchanged in camelCase (attendance and day-order endpoints).

    Accepts both camelCase and snake_case on input; serializes as camelCase.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
