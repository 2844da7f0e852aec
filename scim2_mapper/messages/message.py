from typing import Annotated

from ..annotations import Required
from ..base import BaseModel


class Message(BaseModel):
    """SCIM protocol messages as defined by :rfc:`RFC7644 §3.1 <7644#section-3.1>`."""

    schemas: Annotated[list[str], Required.true]
    """The message schema URN, subclasses provide it as a default."""
