from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def required_text(value: str, field: str) -> str:
    """Strip surrounding whitespace; blank counts as missing."""
    value = value.strip()
    if not value:
        raise ValueError(f"{field} is required")
    return value
