"""Tests for the filter type registry."""

import pytest

from core.errors import UnknownFilterTypeError
from core.filters import DEFAULT_FILTER_SLOTS, FILTERS, UNKNOWN_VALUE, get_filter, values_of


class TestValuesOf:
    """Value extraction per filter type."""

    def test_multi_valued_types_return_all_values(self, make_item):
        """Keywords and faces yield one value per list entry."""
        item = make_item("a.jpg", keywords=("sea", "sun"), faces=("Bob", "Alice"))

        assert values_of("keywords", item) == ["sea", "sun"]
        assert values_of("faces", item) == ["Bob", "Alice"]

    def test_absent_list_is_empty(self, make_item):
        """A missing list is no values, not a single null value."""
        item = make_item("a.jpg")

        assert values_of("keywords", item) == []
        assert values_of("faces", item) == []

    @pytest.mark.parametrize(
        "filter_type", ["caption", "rating", "camera", "lens", "city", "state", "country"]
    )
    def test_absent_single_value_is_unknown(self, make_item, filter_type):
        """Missing single-valued attributes become the unknown placeholder."""
        assert values_of(filter_type, make_item("a.jpg")) == [UNKNOWN_VALUE]

    def test_single_values(self, make_item):
        """Single-valued types return exactly one string."""
        item = make_item(
            "a.jpg",
            rating=4,
            city="Paris",
            camera_model="X100",
            lens="23mm",
            caption="Hello",
            state="IDF",
            country="France",
        )

        assert values_of("rating", item) == ["4"]
        assert values_of("city", item) == ["Paris"]
        assert values_of("camera", item) == ["X100"]
        assert values_of("lens", item) == ["23mm"]
        assert values_of("caption", item) == ["Hello"]
        assert values_of("state", item) == ["IDF"]
        assert values_of("country", item) == ["France"]

    def test_zero_rating_is_a_value(self, make_item):
        """Rating 0 is a real rating, not an unknown one."""
        assert values_of("rating", make_item("a.jpg", rating=0)) == ["0"]

    def test_faces_groups_joins_sorted_names(self, make_item):
        """The face group is a single, order-independent value."""
        item = make_item("a.jpg", faces=("Carol", "Alice", "Bob"))

        assert values_of("faces_groups", item) == ["Alice, Bob, Carol"]
        assert values_of("faces_groups", make_item("b.jpg")) == [UNKNOWN_VALUE]


class TestRegistry:
    """Registry lookup and immutability."""

    def test_unknown_type_fails_fast(self, make_item):
        """Unknown identifiers are contract violations."""
        with pytest.raises(UnknownFilterTypeError):
            values_of("shoe_size", make_item("a.jpg"))
        with pytest.raises(KeyError):
            get_filter("shoe_size")

    def test_array_flags(self):
        """Only list attributes are flagged as multi-valued."""
        assert {k for k, d in FILTERS.items() if d.is_array_value} == {"keywords", "faces"}

    def test_registry_is_read_only(self):
        """The registry cannot be modified at runtime."""
        with pytest.raises(TypeError):
            FILTERS["extra"] = FILTERS["city"]  # type: ignore[index]

    def test_default_slots_are_registered(self):
        """Every default slot names a registered filter type."""
        for slot in DEFAULT_FILTER_SLOTS:
            assert get_filter(slot).key == slot
