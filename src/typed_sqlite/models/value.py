"""Cell value models: the tagged union stored in and read from a column."""

from enum import StrEnum
from typing import Annotated, Literal, assert_never

from pydantic import BaseModel, ConfigDict, Field, field_validator

from typed_sqlite.config import is_blob_hex_rendering

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ValueKind(StrEnum):
    """The storage kinds a cell can hold."""

    INTEGER = "integer"
    REAL = "real"
    TEXT = "text"
    BLOB = "blob"
    NULL = "null"


class IntegerValue(BaseModel):
    """A signed 64-bit integer cell."""

    model_config = ConfigDict(frozen=True, strict=True)

    kind: Literal["integer"] = "integer"
    value: int = Field(ge=INT64_MIN, le=INT64_MAX)


class RealValue(BaseModel):
    """A double-precision floating point cell."""

    model_config = ConfigDict(frozen=True, strict=True)

    kind: Literal["real"] = "real"
    value: float

    @field_validator("value", mode="before")
    @classmethod
    def _widen_int(cls, value: object) -> object:
        """Accept plain ints (never bools) and store them as floats."""
        if isinstance(value, int) and not isinstance(value, bool):
            return float(value)
        return value


class TextValue(BaseModel):
    """A UTF-8 text cell."""

    model_config = ConfigDict(frozen=True, strict=True)

    kind: Literal["text"] = "text"
    value: str

    @field_validator("value")
    @classmethod
    def _encodable(cls, value: str) -> str:
        """Reject lone surrogates and anything else UTF-8 cannot carry."""
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValueError(f"text is not encodable as UTF-8: {e.reason}") from e
        return value


class BlobValue(BaseModel):
    """A raw byte sequence cell."""

    model_config = ConfigDict(frozen=True, strict=True)

    kind: Literal["blob"] = "blob"
    value: bytes

    @field_validator("value", mode="before")
    @classmethod
    def _own_buffer(cls, value: object) -> object:
        """Copy bytearray and memoryview input into immutable bytes."""
        if isinstance(value, bytearray | memoryview):
            return bytes(value)
        return value


class NullValue(BaseModel):
    """An SQL NULL cell. Distinct from any text, including the word "null"."""

    model_config = ConfigDict(frozen=True, strict=True)

    kind: Literal["null"] = "null"
    value: None = None


CellValue = Annotated[
    IntegerValue | RealValue | TextValue | BlobValue | NullValue,
    Field(discriminator="kind"),
]

PlainValue = int | float | str | bytes | bytearray | memoryview | None


def cell(value: "CellValue | PlainValue") -> CellValue:
    """Build the cell variant matching a plain Python value.

    Cell values pass through unchanged. ``bool`` is rejected rather than
    silently stored as an integer.
    """
    match value:
        case IntegerValue() | RealValue() | TextValue() | BlobValue() | NullValue():
            return value
        case bool():
            raise TypeError("bool is not a cell kind; store it as an int explicitly")
        case int():
            return IntegerValue(value=value)
        case float():
            return RealValue(value=value)
        case str():
            return TextValue(value=value)
        case bytes() | bytearray() | memoryview():
            return BlobValue(value=bytes(value))
        case None:
            return NullValue()
    raise TypeError(f"Cannot store {type(value).__name__} in a cell")


def format_cell(value: CellValue, *, blob_as_hex: bool | None = None) -> str:
    """Render just the content of a cell.

    Blobs render either as ``<blob>`` or as lowercase, zero-padded,
    space-separated hex bytes, chosen by ``blob_as_hex``. ``None`` defers
    to TYPED_SQLITE_BLOB_HEX.
    """
    if blob_as_hex is None:
        blob_as_hex = is_blob_hex_rendering()
    match value:
        case IntegerValue(value=number):
            return str(number)
        case RealValue(value=number):
            return repr(number)
        case TextValue(value=text):
            return text
        case BlobValue(value=data):
            return data.hex(" ") if blob_as_hex else "<blob>"
        case NullValue():
            return "NULL"
        case _:
            assert_never(value)


def render_value(value: CellValue, *, blob_as_hex: bool | None = None) -> str:
    """Format: 12 of type integer."""
    return f"{format_cell(value, blob_as_hex=blob_as_hex)} of type {value.kind}"
