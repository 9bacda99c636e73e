"""
Tests for core container behaviour.

Covers:
- Construction and input validation
- Insertion order, updates, appends and removals
- Cursor navigation and save/restore
- Attribute access and flags
- Sync and async iteration
"""

import pytest

from extarray import (
    ARRAY_AS_PROPS,
    Container,
    IndexOutOfRangeError,
    InvalidInputError,
    KeyNotFoundError,
)


class TestConstruction:
    """Tests for building containers from plain data."""

    def test_round_trip(self, container, plain_array):
        """Test to_plain() reproduces the input structure."""
        assert container.to_plain() == plain_array

    def test_list_input(self):
        """Test a list becomes a list-shaped container."""
        values = Container(["a", "b"])
        assert values.keys().to_plain() == [0, 1]
        assert values.to_plain() == ["a", "b"]

    def test_empty_inputs(self):
        """Test None and falsy scalars give empty containers."""
        for data in (None, 0, "", False, [], {}):
            assert Container(data).count() == 0

    def test_empty_export_shape(self, empty_container):
        """Test an empty container exports in the shape it was built from."""
        assert empty_container.to_plain() == []
        assert Container([]).to_plain() == []
        assert Container({}).to_plain() == {}
        assert Container(Container({})).to_plain() == {}
        assert Container({}).copy().to_plain() == {}

    def test_round_trip_empty_children(self):
        """Test nested empty lists and dicts keep their shape."""
        data = {"a": [], "b": {}, "c": [[], {}]}
        assert Container(data).to_plain() == data

    def test_removing_every_entry_keeps_shape(self):
        """Test a container emptied by removals keeps its export shape."""
        named = Container({"a": 1})
        named.remove("a")
        assert named.to_plain() == {}

        values = Container([1])
        values.remove(0)
        assert values.to_plain() == []

    def test_rejects_scalars(self):
        """Test non-empty scalars are refused."""
        for data in ("abc", 5, 1.5, True):
            with pytest.raises(InvalidInputError) as exc_info:
                Container(data)
            assert str(exc_info.value) == "Only array types are accepted as parameter!"

    def test_invalid_input_is_type_error(self):
        """Test InvalidInputError can be caught as TypeError."""
        with pytest.raises(TypeError):
            Container("abc")

    def test_rejects_unsupported_keys(self):
        """Test float and bool keys are refused."""
        with pytest.raises(InvalidInputError):
            Container({1.5: "a"})
        with pytest.raises(InvalidInputError):
            Container({True: "a"})

    def test_nested_values_are_wrapped(self, container):
        """Test nested collections become child containers."""
        child = container.get(0)
        assert isinstance(child, Container)
        assert child.to_plain() == {2: "two", 3: "three"}

    def test_copy_from_container_is_deep(self, container):
        """Test constructing from a container copies nested children."""
        copied = Container(container)
        copied.set("six", {"replaced": True})
        assert container.get("six").to_plain() == {
            "temp": "long string that's not so long",
            "empty": None,
        }
        assert copied.get("six").to_plain() == {"replaced": True}
        assert copied.copy() == copied

    def test_foreign_array_like(self):
        """Test any object exposing entries() and to_plain() is accepted."""

        class Pairs:
            def __init__(self, pairs):
                self._pairs = pairs

            def entries(self):
                return iter(self._pairs)

            def to_plain(self):
                return dict(self._pairs)

        wrapped = Container(Pairs([("x", 1), ("y", 2)]))
        assert wrapped.keys().to_plain() == ["x", "y"]
        assert wrapped.get("y") == 2


class TestReadWrite:
    """Tests for reads, updates, appends and removals."""

    def test_get(self, container):
        """Test get() returns stored values."""
        assert container.get("one") == 1
        assert container.offset_get(7) == "four"
        assert container[8] == "five"

    def test_get_missing(self, container):
        """Test get() on an absent key raises KeyNotFoundError."""
        with pytest.raises(KeyNotFoundError) as exc_info:
            container.get("missing")
        assert str(exc_info.value) == "Key 'missing' doesn't exist!"

        with pytest.raises(KeyError):
            container["missing"]

    def test_has(self, container):
        """Test membership is by key."""
        assert container.has("one")
        assert container.offset_exists(7)
        assert 8 in container
        assert "8" not in container
        assert "four" not in container

    def test_count(self, container, empty_container):
        """Test count(), size() and len() agree."""
        assert container.count() == 5
        assert container.size() == 5
        assert len(container) == 5
        assert len(empty_container) == 0

    def test_child_reads_are_copies(self, container):
        """Test modifying a read child leaves the stored child untouched."""
        child = container.get(0)
        child.set(4, "four")
        assert container.get(0).to_plain() == {2: "two", 3: "three"}

    def test_new_key_appends_to_order(self, container):
        """Test a new key enumerates last."""
        container.set("seven", 7)
        assert container.keys().to_plain() == ["one", 0, 7, 8, "six", "seven"]

    def test_update_keeps_position(self, container):
        """Test updating an existing key does not move it."""
        container.set(0, "updated")
        container.set("one", "updated")
        assert container.keys().to_plain() == ["one", 0, 7, 8, "six"]
        assert container.get(0) == "updated"

    def test_append(self, container):
        """Test append() uses the next integer key."""
        container.append("x")
        container.append("y")
        assert container.keys().to_plain() == ["one", 0, 7, 8, "six", 9, 10]
        assert container.values().to_plain()[-2:] == ["x", "y"]

    def test_append_without_int_keys(self, empty_container):
        """Test append() starts at 0."""
        empty_container.append("a")
        assert empty_container.to_plain() == ["a"]

        named = Container({"a": 1})
        named.append(2)
        assert named.to_plain() == {"a": 1, 0: 2}

    def test_set_none_key_appends(self, container):
        """Test set(None, value) behaves like append()."""
        container[None] = "x"
        assert container.get(9) == "x"

    def test_append_after_removing_highest_key(self):
        """Test the next integer key is recomputed after removal."""
        values = Container(["a", "b"])
        values.remove(1)
        values.append("c")
        assert values.to_plain() == ["a", "c"]

    def test_remove(self, container):
        """Test remove() drops the key from storage and order."""
        container.remove(7)
        assert not container.has(7)
        assert container.keys().to_plain() == ["one", 0, 8, "six"]

        del container["one"]
        container.offset_unset(8)
        assert container.keys().to_plain() == [0, "six"]

    def test_remove_missing(self, container):
        """Test removing an absent key raises KeyNotFoundError."""
        with pytest.raises(KeyNotFoundError):
            container.remove("missing")

    def test_remove_keeps_cursor_key(self, container):
        """Test removing another key leaves the cursor on its key."""
        container.seek_key(7)
        container.remove("one")
        assert container.key() == 7
        assert container.pos() == 1

    def test_remove_current_moves_to_following(self, container):
        """Test removing the current key moves to the following entry."""
        container.seek_key(7)
        container.remove(7)
        assert container.key() == 8

    def test_remove_current_last_goes_past_end(self, container):
        """Test removing the current last key leaves the cursor past-end."""
        container.last()
        container.remove("six")
        assert not container.valid()

    def test_equality(self, container, plain_array):
        """Test containers compare equal to equivalent plain data."""
        assert container == plain_array
        assert container == Container(plain_array)
        assert container != Container()
        assert Container([1, 2]) == [1, 2]
        assert Container([1]) != "[1]"

    def test_repr(self):
        """Test repr shows the plain form."""
        assert repr(Container({"a": 1})) == "Container({'a': 1})"


class TestNavigation:
    """Tests for cursor navigation."""

    def test_fresh_cursor_on_first(self, container):
        """Test a new container starts at the first key."""
        assert container.key() == "one"
        assert container.current() == 1
        assert container.pos() == 0

    def test_empty_container_cursor(self, empty_container):
        """Test navigation on an empty container never becomes valid."""
        assert not empty_container.valid()
        assert empty_container.key() is None
        assert empty_container.current() is None
        assert empty_container.pos() is None
        assert not empty_container.first().valid()
        assert not empty_container.last().valid()

    def test_chaining(self, container):
        """Test navigation methods return the container."""
        assert container.first().next().next().key() == 7
        assert container.last().key() == "six"
        assert container.end().element().to_plain()["empty"] is None
        assert container.rewind().element() == 1

    def test_walk(self, container, plain_array):
        """Test first/valid/next visit every key in order."""
        visited = []
        container.first()
        while container.valid():
            visited.append(container.key())
            container.next()
        assert visited == list(plain_array)
        assert container.key() is None

    def test_prev(self, container):
        """Test prev() steps back one entry."""
        container.seek(3).prev()
        assert container.key() == 7

    def test_prev_from_first(self, container):
        """Test prev() from the first entry leaves the cursor past-end."""
        container.first().prev()
        assert not container.valid()
        assert container.current() is None

        container.prev()
        assert not container.valid()

    def test_seek(self, container):
        """Test seek() jumps to a position."""
        assert container.seek(3).key() == 8

    def test_seek_out_of_range(self, container):
        """Test seek() outside the entries raises IndexOutOfRangeError."""
        with pytest.raises(IndexOutOfRangeError, match="Seek position 5 is out of range"):
            container.seek(5)
        with pytest.raises(IndexOutOfRangeError):
            container.seek(-1)

    def test_seek_key(self, container):
        """Test seek_key() jumps to a key."""
        assert container.seek_key("six").pos() == 4

        with pytest.raises(KeyNotFoundError, match="Key 'seven' doesn't exist!"):
            container.seek_key("seven")

    def test_save_restore(self, container):
        """Test restore_cursor() returns to the saved entry."""
        container.seek(2)
        container.save_cursor()
        container.first()
        container.restore_cursor()
        assert container.key() == 7

    def test_save_restore_is_idempotent(self, container):
        """Test save/restore around reads leaves the position unchanged."""
        container.seek(3)
        container.save_cursor()
        container.get("one")
        container.count()
        container.restore_cursor()
        assert container.pos() == 3

    def test_restore_after_sort(self, container):
        """Test restore_cursor() follows the key through a reorder."""
        container.seek_key(8)
        container.save_cursor()
        container.sort_by_key()
        container.restore_cursor()
        assert container.key() == 8
        assert container.pos() == 2

    def test_preserved_cursor(self, container):
        """Test the context manager restores the cursor on exit."""
        container.seek(1)
        with container.preserved_cursor() as same:
            same.last()
        assert container.key() == 0

    def test_preserved_cursor_on_error(self, container):
        """Test the cursor is restored even when the block raises."""
        container.seek(2)
        with pytest.raises(RuntimeError):
            with container.preserved_cursor():
                container.first()
                raise RuntimeError("boom")
        assert container.key() == 7

    def test_insert_does_not_move_cursor(self, container):
        """Test appending keeps the cursor where it was."""
        container.seek(1)
        container.set("new", True)
        assert container.key() == 0


class TestFlagsAndAttributes:
    """Tests for attribute-style entry access."""

    def test_default_flags(self, container):
        """Test attribute access is on by default."""
        assert container.get_flags() == ARRAY_AS_PROPS
        assert container.get_flags() == Container.ARRAY_AS_PROPS

    def test_read_attribute(self, container):
        """Test string keys are readable as attributes."""
        assert container.one == 1
        assert container.six.to_plain()["empty"] is None

    def test_write_attribute(self, container):
        """Test attribute writes create and update entries."""
        container.seven = 7
        container.one = "uno"
        assert container.get("seven") == 7
        assert container.get("one") == "uno"
        assert container.keys().to_plain()[-1] == "seven"

    def test_delete_attribute(self, container):
        """Test attribute deletion removes the entry."""
        del container.one
        assert not container.has("one")

        with pytest.raises(AttributeError):
            del container.missing

    def test_missing_attribute(self, container):
        """Test unknown attributes raise AttributeError."""
        with pytest.raises(AttributeError):
            container.missing

    def test_methods_take_precedence(self):
        """Test a key named like a method does not shadow it."""
        values = Container({"count": 10})
        assert values.count() == 1
        assert values.get("count") == 10

    def test_writes_to_methods_are_not_entries(self):
        """Test assigning to a method or class attribute name never stores a key."""
        values = Container({"a": 1})
        values.keys = 5
        values.DEFAULT_FLAGS = 0
        assert values.to_plain() == {"a": 1}
        assert not values.has("keys")
        assert values.keys == 5
        assert values.DEFAULT_FLAGS == 0
        assert Container.DEFAULT_FLAGS == ARRAY_AS_PROPS

        del values.keys
        assert values.keys().to_plain() == ["a"]

    def test_flags_off(self, plain_array):
        """Test attribute access is disabled without ARRAY_AS_PROPS."""
        plain = Container(plain_array, flags=0)
        assert plain.get_flags() == 0
        with pytest.raises(AttributeError):
            plain.one

        plain.note = "attribute"
        assert not plain.has("note")
        assert plain.note == "attribute"

    def test_set_flags(self, container):
        """Test flags can be switched at runtime."""
        container.set_flags(0)
        with pytest.raises(AttributeError):
            container.one
        container.set_flags(ARRAY_AS_PROPS)
        assert container.one == 1

    def test_invalid_flags(self):
        """Test unknown or non-int flags are refused."""
        for flags in (1, 4, -1, True, "2", None):
            with pytest.raises(ValueError):
                Container(flags=flags)


class TestIteration:
    """Tests for the iteration protocols."""

    def test_iter_yields_pairs(self, container, plain_array):
        """Test iterating yields (key, value) pairs in order."""
        pairs = list(container)
        assert [key for key, _ in pairs] == list(plain_array)
        assert pairs[2] == (7, "four")
        assert pairs[1][1] == {2: "two", 3: "three"}

    def test_iter_rewinds_and_drives_cursor(self, container):
        """Test a for loop starts at the first entry and ends past-end."""
        container.seek(3)
        assert next(iter(container))[0] == "one"

        for _ in container:
            pass
        assert not container.valid()

    def test_iterator_leaves_cursor(self, container):
        """Test iterator() does not move the cursor."""
        container.seek(2)
        assert dict(container.iterator())[8] == "five"
        assert container.key() == 7

    def test_iterator_range(self, container):
        """Test iterator(start, end) covers positions [start, end)."""
        assert [key for key, _ in container.iterator(1, 3)] == [0, 7]
        assert [key for key, _ in container.iterator(start=3)] == [8, "six"]
        assert [key for key, _ in container.iterator(end=1)] == ["one"]

    def test_iterator_skips_removed_keys(self, container):
        """Test keys removed after the iterator was created are skipped."""
        iterator = container.iterator()
        container.remove(7)
        assert [key for key, _ in iterator] == ["one", 0, 8, "six"]

    def test_entries(self, container):
        """Test entries() yields the stored pairs without moving the cursor."""
        container.seek(4)
        assert [key for key, _ in container.entries()] == ["one", 0, 7, 8, "six"]
        assert container.key() == "six"

    async def test_async_iteration(self, container, plain_array):
        """Test async for yields the same pairs as sync iteration."""
        keys = [key async for key, _ in container]
        assert keys == list(plain_array)

    async def test_async_iterator_range(self, container):
        """Test async_iterator() honours start/end and keeps the cursor."""
        container.seek(1)
        pairs = [pair async for pair in container.async_iterator(2, 4)]
        assert pairs == [(7, "four"), (8, "five")]
        assert container.key() == 0

    async def test_async_iterator_empty(self, empty_container):
        """Test async iteration over an empty container yields nothing."""
        assert [pair async for pair in empty_container.async_iterator()] == []
