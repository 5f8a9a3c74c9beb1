"""Tests for ``architect.runtime.copier``."""

from __future__ import annotations

from collections import OrderedDict, defaultdict

from architect.runtime.copier import deep_copy, descriptor_of, is_container, is_copyable
from architect.runtime.core import Namespace


def test_primitives_and_non_containers_are_returned_unchanged():
    marker = object()
    frozen = (1, 2)

    assert deep_copy(5) == 5
    assert deep_copy("text") == "text"
    assert deep_copy(None) is None
    assert deep_copy(marker) is marker
    assert deep_copy(frozen) is frozen
    assert not is_copyable(frozen)


def test_nested_mappings_are_cloned():
    original = {"a": {"b": {"c": 1}}, "n": 2}
    clone = deep_copy(original)

    assert clone == original
    assert clone is not original
    assert clone["a"] is not original["a"]
    assert clone["a"]["b"] is not original["a"]["b"]

    clone["a"]["b"]["c"] = 99
    assert original["a"]["b"]["c"] == 1


def test_shared_substructures_stay_shared_in_the_clone():
    shared = {"value": 1}
    original = {"left": shared, "right": shared}
    clone = deep_copy(original)

    assert clone["left"] is clone["right"]
    assert clone["left"] is not shared


def test_self_reference_resolves_to_the_clone():
    original = {"name": "root"}
    original["self"] = original
    clone = deep_copy(original)

    assert clone["self"] is clone
    assert clone["self"] is not original


def test_indirect_cycles_keep_their_topology():
    a = {"name": "a"}
    b = {"name": "b", "a": a}
    a["b"] = b
    clone = deep_copy(a)

    assert clone["b"]["a"] is clone
    assert clone["b"] is not b


def test_container_keys_are_cloned_so_original_keys_miss():
    key = Namespace({"id": 1})
    original = {key: "payload"}
    clone = deep_copy(original)

    (clone_key,) = list(clone)
    assert clone_key is not key
    assert dict(clone_key) == {"id": 1}
    assert clone[clone_key] == "payload"
    assert key not in clone


def test_chained_namespace_keeps_delegating_to_the_same_base():
    base = {"x": 1}
    original = Namespace({"y": 2}, base=base)
    clone = deep_copy(original)

    assert isinstance(clone, Namespace)
    assert clone.base is base
    assert clone["x"] == 1
    assert clone["y"] == 2
    assert descriptor_of(original) is base


def test_sealed_namespace_descriptor_is_not_attached():
    base = {"x": 1}
    original = Namespace({"y": 2}, base=base, tag="locked")
    clone = deep_copy(original)

    assert descriptor_of(original) == "locked"
    assert original["x"] == 1
    assert clone.base is None
    assert clone.tag is None
    assert clone.get("x") is None
    assert clone["y"] == 2


def test_dict_subclasses_keep_their_type():
    ordered = OrderedDict(a=1, b=2)
    counts = defaultdict(int, hits=3)
    clone = deep_copy({"ordered": ordered, "counts": counts})

    assert descriptor_of({}) is None
    assert type(clone["ordered"]) is OrderedDict
    assert list(clone["ordered"]) == ["a", "b"]
    assert clone["ordered"] is not ordered
    assert type(clone["counts"]) is defaultdict
    assert clone["counts"].default_factory is int
    assert clone["counts"]["misses"] == 0
    assert "misses" not in counts


def test_lists_and_sets_are_cloned_but_never_describe_a_namespace():
    shared = {"v": 1}
    items = [shared, shared]
    tags = {"a", "b"}
    clone = deep_copy({"items": items, "tags": tags, "again": items})

    assert clone["items"] is not items
    assert clone["items"] is clone["again"]
    assert clone["items"][0] is clone["items"][1]
    assert clone["items"][0] is not shared
    assert clone["tags"] == tags and clone["tags"] is not tags

    items.append("later")
    assert len(clone["items"]) == 2
    assert not is_container(items)
    assert is_copyable(items)

    original = Namespace(base=[1])
    assert deep_copy(original).base is None


def test_seen_map_is_shared_across_calls():
    shared = {"value": 1}
    seen = {}

    first = deep_copy({"item": shared}, seen)
    second = deep_copy({"item": shared}, seen)

    assert first["item"] is second["item"]
    original, clone = seen[id(shared)]
    assert original is shared
    assert clone is first["item"]


def test_shared_seen_map_never_confuses_temporary_originals():
    seen = {}

    first = deep_copy({"x": 1}, seen)
    second = deep_copy({"y": 2}, seen)

    assert first == {"x": 1}
    assert second == {"y": 2}
    assert first is not second
