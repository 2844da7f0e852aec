from collections.abc import Mapping
from typing import Any
from typing import ClassVar
from typing import Optional
from typing import Union

from typing_extensions import Self

from .configuration import DEFAULT_CONFIGURATION
from .configuration import EngineConfiguration
from .mapping import AttributeMap
from .resources.resource import Resource


class ScimMixin:
    """Make a domain class convertible to and from SCIM resources.

    The domain class declares the SCIM resource it stands for and how its
    attributes map to the resource attributes::

        class User(ScimMixin):
            __scim_resource__ = scim2_mapper.User
            __scim_attributes__ = {
                "id": "id",
                "userName": "username",
                "name": {"givenName": "first_name", "familyName": "last_name"},
                "emails": [
                    {"match": "type", "with": "work", "using": {"value": "email"}},
                ],
            }
            __scim_queryable_attributes__ = {"userName": "username"}

    The mapping is compiled once, when the class is defined.
    """

    __scim_resource__: ClassVar[type[Resource]]
    __scim_attributes__: ClassVar[Any]
    __scim_queryable_attributes__: ClassVar[Mapping[str, Any]] = {}
    __scim_configuration__: ClassVar[EngineConfiguration] = DEFAULT_CONFIGURATION

    _scim_attribute_map: ClassVar[AttributeMap]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "__scim_attributes__" not in cls.__dict__:
            return

        resource = getattr(cls, "__scim_resource__", None)
        if resource is None:
            raise TypeError(f"{cls.__name__} must define __scim_resource__")

        cls._scim_attribute_map = AttributeMap(
            cls.__scim_attributes__,
            resource,
            owner=cls,
            configuration=cls.__scim_configuration__,
        )

    @classmethod
    def scim_attribute_map(cls) -> AttributeMap:
        return cls._scim_attribute_map

    @classmethod
    def scim_queryable_attributes(cls) -> Mapping[str, Any]:
        """The SCIM attributes which can be used in list filters, with their storage fields.

        This is what :class:`~scim2_mapper.lists.query_parser.QueryParser` expects.
        """
        return cls.__scim_queryable_attributes__

    @classmethod
    def scim_mutable_attributes(cls) -> list[str]:
        """The names of the mapped accessors which can be written."""
        return cls._scim_attribute_map.mutable_attributes(cls)

    def to_scim(self, location: Optional[str] = None) -> Resource:
        """Build the SCIM resource representing this object.

        :param location: The URL of the resource, stored in ``meta.location``.
        """
        payload = self._scim_attribute_map.to_scim(self)
        if location is not None:
            meta = dict(payload.get("meta") or {})
            meta["location"] = location
            payload["meta"] = meta
        return self.__scim_resource__(payload)

    def from_scim(self, payload: Union[Resource, Mapping[str, Any]]) -> Self:
        """Replace the mapped attributes of this object with the payload values.

        Mapped attributes missing from the payload are cleared, as for a
        SCIM ``PUT``. Nothing is saved: storing the object, in a single
        transaction, is up to the caller.
        """
        if isinstance(payload, Resource):
            payload = payload.to_dict()
        self._scim_attribute_map.from_scim(self, payload)
        return self

    def from_scim_patch(self, patch_payload: Mapping[str, Any]) -> Self:
        """Apply a SCIM ``PATCH`` request payload to this object.

        The operations are applied to the SCIM representation of the
        object, which is then written back with :meth:`from_scim`.
        """
        from .patch import apply_patch

        return apply_patch(self, patch_payload, self.__scim_configuration__)
