"""Typed wire structures for Insights imports and connector logs.

Every structure is a frozen ``msgspec.Struct`` encoded with camelCase field
names, so ``msgspec.json.encode`` yields exactly the document the Insights API
expects. Attribute values and stream items are tagged unions keyed on a
``type`` field that msgspec always writes first.

Example:
>>> import msgspec
>>> from insights_client.models import NumberValue
>>> msgspec.json.encode(NumberValue(value=3))
b'{"type":"number","value":3}'

"""

from __future__ import annotations

import datetime as dt
import enum
import typing as typ

import msgspec


class ValueType(enum.StrEnum):
    """Lists all supported attribute assignment value types."""

    BOOLEAN = "boolean"
    DATE = "date"
    DATE_TIME = "dateTime"
    NUMBER = "number"
    STRING = "string"
    TIME = "time"


class Date(msgspec.Struct, frozen=True, kw_only=True):
    """Calendar date in UTC."""

    year: int
    month: int
    day: int

    @classmethod
    def from_date(cls, value: dt.date) -> Date:
        """Return the calendar fields of ``value``."""
        return cls(year=value.year, month=value.month, day=value.day)


class DateTime(msgspec.Struct, frozen=True, kw_only=True):
    """Timestamp in UTC, truncated to whole seconds."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    @classmethod
    def from_datetime(cls, value: dt.datetime) -> DateTime:
        """Return the UTC fields of ``value``.

        Aware datetimes are converted to UTC first; naive datetimes are taken
        to already be in UTC.
        """
        if value.tzinfo is not None:
            value = value.astimezone(dt.UTC)
        return cls(
            year=value.year,
            month=value.month,
            day=value.day,
            hour=value.hour,
            minute=value.minute,
            second=value.second,
        )


class Time(msgspec.Struct, frozen=True, kw_only=True):
    """Time of day without a date or offset."""

    hour: int
    minute: int
    second: int

    @classmethod
    def from_time(cls, value: dt.time) -> Time:
        """Return the clock fields of ``value``."""
        return cls(hour=value.hour, minute=value.minute, second=value.second)


class _TaggedValue(msgspec.Struct, frozen=True, kw_only=True, tag_field="type"):
    """Base for attribute values; subclasses set the ``type`` tag."""


class BooleanValue(_TaggedValue, tag=ValueType.BOOLEAN.value):
    """Boolean attribute assignment value."""

    value: bool


class DateValue(_TaggedValue, tag=ValueType.DATE.value):
    """Date attribute assignment value."""

    value: Date


class DateTimeValue(_TaggedValue, tag=ValueType.DATE_TIME.value):
    """Date-time attribute assignment value."""

    value: DateTime


class NumberValue(_TaggedValue, tag=ValueType.NUMBER.value):
    """Number attribute assignment value."""

    value: int | float


class StringValue(_TaggedValue, tag=ValueType.STRING.value):
    """String attribute assignment value."""

    value: str


class TimeValue(_TaggedValue, tag=ValueType.TIME.value):
    """Time-of-day attribute assignment value."""

    value: Time


Value: typ.TypeAlias = (
    BooleanValue | DateValue | DateTimeValue | NumberValue | StringValue | TimeValue
)

Scalar: typ.TypeAlias = bool | str | int | float | dt.date | dt.datetime | dt.time


def value_of(obj: Scalar) -> Value:
    """Wrap a Python scalar in the matching attribute value variant.

    Parameters
    ----------
    obj
        A ``bool``, ``str``, ``int``, ``float``, ``datetime.date``,
        ``datetime.datetime``, or ``datetime.time``.

    Returns
    -------
    Value
        The tagged value carrying ``obj``.

    Raises
    ------
    TypeError
        If ``obj`` has no attribute value counterpart.

    """
    # bool before int and datetime before date: both are subclasses.
    match obj:
        case bool():
            return BooleanValue(value=obj)
        case str():
            return StringValue(value=obj)
        case int() | float():
            return NumberValue(value=obj)
        case dt.datetime():
            return DateTimeValue(value=DateTime.from_datetime(obj))
        case dt.date():
            return DateValue(value=Date.from_date(obj))
        case dt.time():
            return TimeValue(value=Time.from_time(obj))
        case _:
            msg = f"unsupported attribute value type: {type(obj).__name__}"
            raise TypeError(msg)


class AttributeAssignment(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Assignment of a value for one attribute type to an entity or relationship.

    Attributes
    ----------
    attribute_type_id : str
        Identifier of the attribute type on the Insights server.
    value : Value
        Tagged value assigned to the attribute.

    """

    attribute_type_id: str
    value: Value


class Entity(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Single entity in an import.

    Attributes
    ----------
    id : str
        Identifier, unique per entity type within an import.
    name : str
        Display name.
    type : str
        Entity type identifier.
    attribute_assignments : tuple[AttributeAssignment, ...]
        Ordered attribute assignments; duplicates are passed through.

    """

    id: str
    name: str
    type: str
    attribute_assignments: tuple[AttributeAssignment, ...] = ()


class Relationship(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Directed relationship between two entities in an import.

    The referenced entities need not be part of the same import.

    Attributes
    ----------
    from_entity_id : str
        Identifier of the source entity.
    from_entity_type : str
        Type of the source entity.
    to_entity_id : str
        Identifier of the destination entity.
    to_entity_type : str
        Type of the destination entity.
    attribute_assignments : tuple[AttributeAssignment, ...]
        Ordered attribute assignments.

    """

    from_entity_id: str
    from_entity_type: str
    to_entity_id: str
    to_entity_type: str
    attribute_assignments: tuple[AttributeAssignment, ...] = ()


class _TaggedStreamItem(msgspec.Struct, frozen=True, kw_only=True, tag_field="type"):
    """Base for stream items; subclasses set the ``type`` tag."""


class EntityStreamItem(_TaggedStreamItem, tag="entity"):
    """Incremental entity change."""

    entity: Entity


class RelationshipStreamItem(_TaggedStreamItem, tag="relationship"):
    """Incremental relationship change."""

    relationship: Relationship


StreamItem: typ.TypeAlias = EntityStreamItem | RelationshipStreamItem


def stream_item(item: Entity | Relationship) -> StreamItem:
    """Wrap an entity or relationship as a stream item."""
    match item:
        case Entity():
            return EntityStreamItem(entity=item)
        case Relationship():
            return RelationshipStreamItem(relationship=item)
        case _:
            msg = f"unsupported stream item type: {type(item).__name__}"
            raise TypeError(msg)


class GraphDocument(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Fully materialised import document.

    Used to decode import files and as the reference, non-streaming encoding
    of a graph. Field order matches the streamed document.
    """

    entities: tuple[Entity, ...] = ()
    relationships: tuple[Relationship, ...] = ()
    stream_items: tuple[StreamItem, ...] = ()


class ConnectorLogLevel(enum.StrEnum):
    """Severity levels accepted by the connector log endpoint."""

    ALERT = "alert"
    INFO = "info"


class ConnectorLog(msgspec.Struct, frozen=True, kw_only=True):
    """Single connector log record."""

    level: ConnectorLogLevel
    message: str
    timestamp: dt.datetime


__all__ = [
    "AttributeAssignment",
    "BooleanValue",
    "ConnectorLog",
    "ConnectorLogLevel",
    "Date",
    "DateTime",
    "DateTimeValue",
    "DateValue",
    "Entity",
    "EntityStreamItem",
    "GraphDocument",
    "NumberValue",
    "Relationship",
    "RelationshipStreamItem",
    "Scalar",
    "StreamItem",
    "StringValue",
    "Time",
    "TimeValue",
    "Value",
    "ValueType",
    "stream_item",
    "value_of",
]
