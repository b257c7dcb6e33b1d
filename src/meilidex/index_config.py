"""Declarative index configuration for document models.

A document model subclasses `IndexConfig` and flags its fields::

    class MovieClips(IndexConfig):
        movie_id: Annotated[int, IndexField("primary_key")]
        title: Annotated[str, IndexField("displayed", "searchable")]
        release_date: Annotated[str, IndexField("filterable", "sortable", "displayed")]

The model then knows its index name (``movie_clips``), the settings its flags
imply, and how to create the index on a service.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel

from meilidex.exceptions import ConfigError
from meilidex.settings import Settings

if TYPE_CHECKING:
    from meilidex.client import Client
    from meilidex.indexes import Index

VALID_FLAGS = frozenset(
    {"displayed", "searchable", "filterable", "sortable", "primary_key", "distinct"}
)
# Flags at most one field of a model may carry
SINGLE_FLAGS = ("primary_key", "distinct")


class IndexField:
    """Field marker listing how a field takes part in the index."""

    __slots__ = ("flags",)

    def __init__(self, *flags: str) -> None:
        seen: List[str] = []
        for flag in flags:
            if flag not in VALID_FLAGS:
                raise ConfigError(f"Property `{flag}` does not exist for type `index_config`")
            if flag in seen:
                raise ConfigError(f"`{flag}` already exists for this field")
            seen.append(flag)
        self.flags: Tuple[str, ...] = tuple(seen)

    def __repr__(self) -> str:
        return f"IndexField({', '.join(repr(f) for f in self.flags)})"


def to_snake_case(name: str) -> str:
    """Convert an UpperCamel class name to snake_case (``MovieClips`` -> ``movie_clips``)."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


class IndexConfig(BaseModel):
    """Base for document models that carry their own index configuration."""

    # Overrides the name derived from the class name
    index_name_override: ClassVar[Optional[str]] = None

    __index_fields__: ClassVar[Dict[str, Tuple[str, ...]]] = {}

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        fields: Dict[str, Tuple[str, ...]] = {}
        owners: Dict[str, str] = {}
        for name, info in cls.model_fields.items():
            flags: List[str] = []
            for meta in info.metadata:
                if not isinstance(meta, IndexField):
                    continue
                for flag in meta.flags:
                    if flag in flags:
                        raise ConfigError(f"`{flag}` already exists for field `{name}`")
                    flags.append(flag)
            for flag in SINGLE_FLAGS:
                if flag in flags:
                    if flag in owners:
                        raise ConfigError(
                            f"`{flag}` already exists (on `{owners[flag]}`, again on `{name}`)"
                        )
                    owners[flag] = name
            fields[name] = tuple(flags)
        cls.__index_fields__ = fields

    @classmethod
    def index_name(cls) -> str:
        return cls.index_name_override or to_snake_case(cls.__name__)

    @classmethod
    def _flagged(cls, flag: str) -> List[str]:
        return [name for name, flags in cls.__index_fields__.items() if flag in flags]

    @classmethod
    def primary_key(cls) -> Optional[str]:
        found = cls._flagged("primary_key")
        return found[0] if found else None

    @classmethod
    def index(cls, client: Client) -> Index:
        return client.index(cls.index_name())

    @classmethod
    def generate_settings(cls) -> Settings:
        """Settings implied by the field flags.

        Attribute lists are always set, empty when no field is flagged, so
        applying them replaces whatever the index had before.
        """
        settings = (
            Settings()
            .with_displayed_attributes(cls._flagged("displayed"))
            .with_sortable_attributes(cls._flagged("sortable"))
            .with_filterable_attributes(cls._flagged("filterable"))
            .with_searchable_attributes(cls._flagged("searchable"))
        )
        distinct = cls._flagged("distinct")
        if distinct:
            settings = settings.with_distinct_attribute(distinct[0])
        return settings

    @classmethod
    async def generate_index(
        cls,
        client: Client,
        *,
        interval: Optional[timedelta] = None,
        timeout: Optional[timedelta] = None,
    ) -> Index:
        """Create the index, wait for the task and return a handle to it.

        Raises `TaskNotSucceededError` when the creation task failed or was
        canceled.
        """
        task_info = await client.create_index(cls.index_name(), cls.primary_key())
        task = await client.wait_for_task(task_info, interval=interval, timeout=timeout)
        return task.try_make_index(client)
