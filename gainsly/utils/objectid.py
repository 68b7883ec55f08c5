"""Gainsly API - ObjectId helpers."""

from beanie import PydanticObjectId
from bson.errors import InvalidId

from gainsly.utils.errors import NotFoundError


def parse_object_id(value: str, resource: str) -> PydanticObjectId:
    """
    Parse a path parameter into an ObjectId.

    A malformed id can never match a document, so it is reported as the
    resource being missing.

    Raises:
        NotFoundError: If ``value`` is not a valid ObjectId.
    """
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        raise NotFoundError(resource)
