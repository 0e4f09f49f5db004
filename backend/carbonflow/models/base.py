"""Shared pydantic configuration for document-shaped models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """Base for models serialized into the store document and API.

    Python attributes are snake_case; the stored and wire field names are the
    stable camelCase names (``setupProgress``, ``currentProjectId``...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
