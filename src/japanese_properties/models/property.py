"""
Property Data Models

Pydantic model for a single Japanese real-estate listing and the explicit
column schema used to read it from CSV uploads.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Any, get_args

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


@dataclass(frozen=True)
class ColumnSpec:
    """
    Typed descriptor for one CSV column.

    Attributes:
        field: PropertyRecord attribute the column populates
        kind: Type of the PropertyRecord field (checked at import, used in row errors)
        aliases: Additional header names accepted for the column
        required: Whether a blank cell is rejected
    """

    field: str
    kind: type
    aliases: Tuple[str, ...] = ()
    required: bool = False

    @property
    def header_names(self) -> Tuple[str, ...]:
        return (self.field,) + self.aliases

    @property
    def kind_label(self) -> str:
        return KIND_LABELS.get(self.kind, self.kind.__name__)


KIND_LABELS = {str: "text", int: "a whole number", float: "a number"}


# Address components first, in Japanese address order.
PROPERTY_COLUMNS: Tuple[ColumnSpec, ...] = (
    ColumnSpec("prefecture", str, ("都道府県",), required=True),
    ColumnSpec("city", str, ("市区町村",), required=True),
    ColumnSpec("town", str, ("町名", "町域")),
    ColumnSpec("chome", str, ("丁目",)),
    ColumnSpec("banchi", str, ("番地",)),
    ColumnSpec("go", str, ("号",)),
    ColumnSpec("building", str, ("建物名",)),
    ColumnSpec("price", int, ("価格",), required=True),
    ColumnSpec("nearest_station", str, ("最寄り駅", "最寄駅")),
    ColumnSpec("property_type", str, ("物件種別", "種別")),
    ColumnSpec("land_area", float, ("土地面積",)),
)

ADDRESS_FIELDS = ("prefecture", "city", "town", "chome", "banchi", "go", "building")


def normalize_header(name: str) -> str:
    """Normalize a CSV header cell for schema lookup."""
    return name.strip().lower().replace(" ", "_").replace("-", "_")


HEADER_LOOKUP = {
    normalize_header(name): column
    for column in PROPERTY_COLUMNS
    for name in column.header_names
}


class PropertyRecord(BaseModel):
    """
    One real-estate listing as parsed from an uploaded CSV.

    Records are immutable; a new upload produces new instances.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(..., ge=0, description="Sequential id assigned at ingestion")
    prefecture: str = Field(..., min_length=1, description="Prefecture (都道府県)")
    city: str = Field(..., min_length=1, description="City or ward (市区町村)")
    town: str = Field("", description="Town (町名)")
    chome: str = Field("", description="Chome block (丁目)")
    banchi: str = Field("", description="Lot number (番地)")
    go: str = Field("", description="Building number (号)")
    building: str = Field("", description="Building name (建物名)")
    price: int = Field(..., ge=0, description="Asking price in yen")
    nearest_station: str = Field("", description="Nearest station (最寄り駅)")
    property_type: str = Field("", description="Property type (物件種別)")
    land_area: Optional[float] = Field(None, ge=0, allow_inf_nan=False, description="Land area in square meters")

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v: Any) -> Any:
        """Accept thousands separators and a trailing yen sign."""
        if isinstance(v, str):
            cleaned = v.strip().lstrip("¥￥").rstrip("円").replace(",", "").strip()
            if not cleaned:
                raise ValueError("price is required")
            if not cleaned.isdigit():
                raise ValueError("price must be a whole number of yen")
            return cleaned
        return v

    @field_validator("land_area", mode="before")
    @classmethod
    def parse_land_area(cls, v: Any) -> Any:
        """Blank land area means the listing has none (e.g. apartments)."""
        if isinstance(v, str):
            cleaned = v.strip().rstrip("㎡").replace(",", "").strip()
            if "_" in cleaned:
                raise ValueError("land_area must be a plain decimal number")
            return cleaned or None
        return v

    @computed_field
    @property
    def full_address(self) -> str:
        """Address components joined in Japanese order, without separators."""
        return "".join(getattr(self, name) for name in ADDRESS_FIELDS)


def validate_schema(columns: Tuple[ColumnSpec, ...]) -> None:
    """
    Check that every column descriptor agrees with PropertyRecord.

    Raises:
        TypeError: If a column names an unknown field or its kind differs
            from the field's declared type
    """
    for column in columns:
        model_field = PropertyRecord.model_fields.get(column.field)
        if model_field is None or column.field == "id":
            raise TypeError(f"Column '{column.field}' has no PropertyRecord field")
        declared = tuple(t for t in get_args(model_field.annotation) if t is not type(None))
        declared = declared or (model_field.annotation,)
        if column.kind not in declared:
            raise TypeError(
                f"Column '{column.field}' is declared as {column.kind.__name__} "
                f"but PropertyRecord.{column.field} is {model_field.annotation}"
            )


validate_schema(PROPERTY_COLUMNS)
