"""
Tests for the PropertyRecord model and the CSV column schema.
"""
import pytest
from pydantic import ValidationError

from src.japanese_properties.models.property import (
    HEADER_LOOKUP,
    PROPERTY_COLUMNS,
    ColumnSpec,
    PropertyRecord,
    normalize_header,
    validate_schema,
)


def build_record(**overrides) -> PropertyRecord:
    values = {
        "id": 1,
        "prefecture": "東京都",
        "city": "渋谷区",
        "town": "神宮前",
        "chome": "1丁目",
        "banchi": "2番",
        "go": "3号",
        "building": "神宮前レジデンス",
        "price": "85000000",
        "nearest_station": "明治神宮前駅",
        "property_type": "マンション",
        "land_area": "",
    }
    values.update(overrides)
    return PropertyRecord(**values)


class TestPropertyRecord:
    """Tests for PropertyRecord parsing and serialization."""

    def test_full_address_joins_components_in_order(self):
        """Full address concatenates prefecture through building."""
        record = build_record()
        assert record.full_address == "東京都渋谷区神宮前1丁目2番3号神宮前レジデンス"

    def test_full_address_skips_blank_components(self):
        """Blank components contribute nothing to the full address."""
        record = build_record(chome="", go="", building="")
        assert record.full_address == "東京都渋谷区神宮前2番"

    def test_serialization_includes_full_address(self):
        """model_dump exposes the derived full_address field."""
        dumped = build_record().model_dump()
        assert dumped["full_address"] == "東京都渋谷区神宮前1丁目2番3号神宮前レジデンス"
        assert dumped["id"] == 1
        assert dumped["price"] == 85000000

    def test_strings_are_stripped(self):
        """Surrounding whitespace is removed from text fields."""
        record = build_record(city="  渋谷区 ", building=" ")
        assert record.city == "渋谷区"
        assert record.building == ""

    def test_price_accepts_separators_and_yen(self):
        """Thousands separators and yen markers are tolerated."""
        assert build_record(price="45,800,000").price == 45800000
        assert build_record(price="32000000円").price == 32000000
        assert build_record(price="¥1,000").price == 1000

    def test_price_rejects_text(self):
        """A non-numeric price is a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            build_record(price="応相談")
        assert exc_info.value.errors()[0]["loc"] == ("price",)

    def test_price_rejects_blank(self):
        """A blank price is a validation error."""
        with pytest.raises(ValidationError):
            build_record(price="  ")

    def test_negative_price_rejected(self):
        """Prices cannot be negative."""
        with pytest.raises(ValidationError):
            build_record(price="-1")

    def test_land_area_blank_is_none(self):
        """Blank land area parses to None."""
        assert build_record(land_area="").land_area is None

    def test_land_area_parses_float(self):
        """Land area parses as a float, with an optional square-meter unit."""
        assert build_record(land_area="95.4").land_area == pytest.approx(95.4)
        assert build_record(land_area="120㎡").land_area == pytest.approx(120.0)

    def test_land_area_rejects_text(self):
        """Non-numeric land area is a validation error."""
        with pytest.raises(ValidationError):
            build_record(land_area="広い")

    @pytest.mark.parametrize("value", ["inf", "Infinity", "-inf", "nan"])
    def test_land_area_rejects_non_finite(self, value):
        """Infinity and NaN are not land areas."""
        with pytest.raises(ValidationError):
            build_record(land_area=value)

    def test_land_area_rejects_underscore_groups(self):
        """Python-style digit grouping is not accepted."""
        with pytest.raises(ValidationError):
            build_record(land_area="1_000.5")

    def test_price_rejects_underscore_groups(self):
        """Python-style digit grouping is not a price."""
        with pytest.raises(ValidationError) as exc_info:
            build_record(price="1_000")
        assert "whole number" in exc_info.value.errors()[0]["msg"]

    def test_price_rejects_decimal(self):
        """Prices are whole yen."""
        with pytest.raises(ValidationError):
            build_record(price="1000.5")

    def test_prefecture_required(self):
        """Prefecture cannot be blank."""
        with pytest.raises(ValidationError):
            build_record(prefecture="")

    def test_records_are_immutable(self):
        """Assigning to a field after construction fails."""
        record = build_record()
        with pytest.raises(ValidationError):
            record.price = 1


class TestColumnSchema:
    """Tests for the explicit CSV column schema."""

    def test_schema_covers_every_descriptive_field(self):
        """Every model field except id has exactly one column."""
        fields = [column.field for column in PROPERTY_COLUMNS]
        assert len(fields) == len(set(fields))
        assert set(fields) == set(PropertyRecord.model_fields) - {"id"}

    def test_column_kinds_match_model(self):
        """The shipped schema agrees with the model's field types."""
        validate_schema(PROPERTY_COLUMNS)
        kinds = {column.field: column.kind for column in PROPERTY_COLUMNS}
        assert kinds["price"] is int
        assert kinds["land_area"] is float

    def test_mismatched_kind_rejected(self):
        """A column whose kind differs from the model field is a schema error."""
        bad = PROPERTY_COLUMNS[:-1] + (ColumnSpec("land_area", int),)
        with pytest.raises(TypeError, match="land_area"):
            validate_schema(bad)

    def test_unknown_field_rejected(self):
        """A column without a model field is a schema error."""
        with pytest.raises(TypeError, match="floor"):
            validate_schema((ColumnSpec("floor", int),))

    def test_id_is_not_a_column(self):
        """Ids are assigned, never read from a column."""
        with pytest.raises(TypeError):
            validate_schema((ColumnSpec("id", int),))

    def test_kind_labels(self):
        """Kinds render as readable labels for row errors."""
        labels = {column.field: column.kind_label for column in PROPERTY_COLUMNS}
        assert labels["price"] == "a whole number"
        assert labels["land_area"] == "a number"
        assert labels["city"] == "text"

    def test_japanese_aliases_resolve(self):
        """Japanese header names map to the same columns."""
        assert HEADER_LOOKUP[normalize_header("都道府県")].field == "prefecture"
        assert HEADER_LOOKUP[normalize_header("最寄り駅")].field == "nearest_station"
        assert HEADER_LOOKUP[normalize_header("土地面積")].field == "land_area"

    def test_header_normalization(self):
        """Case, spaces and hyphens do not matter in English headers."""
        assert HEADER_LOOKUP[normalize_header(" Nearest Station ")].field == "nearest_station"
        assert HEADER_LOOKUP[normalize_header("Property-Type")].field == "property_type"
