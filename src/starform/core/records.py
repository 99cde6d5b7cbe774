from typing import Union

from pydantic import BaseModel, ConfigDict

RecordId = Union[int, str]


class Record(BaseModel):
    """A persisted record. The id is assigned by the server, never by the client."""
    model_config = ConfigDict(frozen=True)

    id: RecordId
    name: str
