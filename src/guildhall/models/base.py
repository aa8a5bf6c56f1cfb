from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Immutable snapshot model. Wire form is camelCase JSON; Python side is snake_case."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys, as stored and broadcast."""
        return self.model_dump(mode="json", by_alias=True)
