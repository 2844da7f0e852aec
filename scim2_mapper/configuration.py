from typing import Callable
from typing import Optional

from pydantic import ConfigDict
from pydantic import Field

from .base import BaseModel


class EngineConfiguration(BaseModel):
    """Settings shared by the validation and mapping engines.

    A configuration is built once, next to the resource and mapping
    definitions, and handed to :class:`~scim2_mapper.validator.Validator`
    and :class:`~scim2_mapper.mapping.AttributeMap` instances. It is
    frozen so it can be shared between requests.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    optional_value_fields_required: bool = True
    """Whether the ``value`` sub-attribute of Value/Display/Type/Primary
    complex types (emails, phone numbers...) is required.

    :rfc:`RFC7643 <7643#section-2.4>` leaves it optional, but most
    clients rely on it being present.
    """

    exception_reporter: Optional[Callable[[Exception], None]] = Field(
        None, exclude=True
    )
    """Called with the underlying exception whenever a PATCH failure is
    reported to the client as a generic ``invalidSyntax`` error."""


DEFAULT_CONFIGURATION = EngineConfiguration()
