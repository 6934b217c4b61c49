"""Named fields and the two row shapes built from them."""

from collections.abc import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from typed_sqlite.models.value import CellValue, PlainValue, cell, format_cell, render_value


class NamedField(BaseModel):
    """A column name paired with a cell value.

    Used for SET/VALUES lists, WHERE bindings, and decoded result columns.
    ``value`` accepts a cell or a plain Python value.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    value: CellValue

    @field_validator("value", mode="before")
    @classmethod
    def _wrap_plain_value(cls, value: object) -> object:
        """Convert plain Python values into their cell variant."""
        if isinstance(value, BaseModel | dict):
            return value
        return cell(value)  # type: ignore[arg-type]

    def __str__(self) -> str:
        return render_field(self)


Row = list[NamedField]
RowMapping = dict[str, CellValue]


def field(name: str, value: "CellValue | PlainValue") -> NamedField:
    """Shorthand for ``NamedField(name=name, value=value)``."""
    return NamedField(name=name, value=value)


def fields_from(values: Mapping[str, "CellValue | PlainValue"]) -> list[NamedField]:
    """Build a field list from a mapping, keeping its iteration order."""
    return [field(name, value) for name, value in values.items()]


def render_field(named: NamedField, *, blob_as_hex: bool | None = None) -> str:
    """Format: name: age, value: 12 of type integer."""
    return f"name: {named.name}, value: {render_value(named.value, blob_as_hex=blob_as_hex)}"


def row_to_mapping(row: Iterable[NamedField]) -> RowMapping:
    """Collapse a positional row into a name-keyed mapping.

    Duplicate column names (typical of joins) keep the last value.
    """
    return {named.name: named.value for named in row}


def rows_to_mappings(rows: Iterable[Iterable[NamedField]]) -> list[RowMapping]:
    """Collapse every row of a result set."""
    return [row_to_mapping(row) for row in rows]


def render_row_mapping(mapping: Mapping[str, CellValue], *, blob_as_hex: bool | None = None) -> str:
    """Format: age: 12|name: Mickey|, columns sorted by name."""
    return "".join(
        f"{name}: {format_cell(mapping[name], blob_as_hex=blob_as_hex)}|"
        for name in sorted(mapping)
    )
