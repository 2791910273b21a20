"""Unit tests for link id coercion."""

import uuid

import pytest

from smartlink.domain.value_objects import coerce_link_id


class TestCoerceLinkId:
    """Tests for coerce_link_id()."""

    def test_canonical_uuid_string_passes(self) -> None:
        """A plain 36-char UUID is returned canonical."""
        value = "3F2504E0-4F89-11D3-9A0C-0305E82C3301"
        assert coerce_link_id(value) == value.lower()

    def test_uuid_instance(self) -> None:
        """uuid.UUID objects are accepted."""
        value = uuid.uuid4()
        assert coerce_link_id(value) == str(value)

    def test_surrounding_whitespace_is_ignored(self) -> None:
        """Whitespace around an otherwise valid id is stripped."""
        value = str(uuid.uuid4())
        assert coerce_link_id(f"  {value} ") == value

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "link-spotify",
            "3f2504e04f8911d39a0c0305e82c3301",  # 32-hex form
            "{3f2504e0-4f89-11d3-9a0c-0305e82c3301}",
            "zzzzzzzz-zzzz-zzzz-zzzz-zzzzzzzzzzzz",
            12345,
        ],
    )
    def test_non_uuid_values_become_none(self, value: object) -> None:
        """Anything not UUID-shaped is dropped."""
        assert coerce_link_id(value) is None
