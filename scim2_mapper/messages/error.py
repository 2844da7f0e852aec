from typing import Annotated
from typing import Optional

from pydantic import PlainSerializer

from ..utils import _int_to_str
from .message import Message


class Error(Message):
    """Representation of SCIM API errors.

    :rfc:`RFC 7644 Section 3.12 <7644#section-3.12>`
    """

    schemas: list[str] = ["urn:ietf:params:scim:api:messages:2.0:Error"]

    status: Annotated[Optional[int], PlainSerializer(_int_to_str)] = None
    """The HTTP status code (see Section 6 of [RFC7231]) expressed as a JSON
    string."""

    scim_type: Optional[str] = None
    """A SCIM detail error keyword."""

    detail: Optional[str] = None
    """A detailed human-readable message."""
