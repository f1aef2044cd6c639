"""Unit tests for MetadataRegistry storage and chain walking."""

import gc

import pytest

from metaregistry.common.exceptions import ErrorCode, MetadataTypeError
from metaregistry.store import MetadataRegistry
from metaregistry.types import Symbol


class Plain:
    pass


class TestOwnMetadata:
    """Define, read and delete metadata on a single target."""

    def test_define_then_get_own(self, registry):
        target = Plain()
        registry.define("k", "v", target, "member")

        assert registry.get_own("k", target, "member") == "v"
        assert registry.has_own("k", target, "member") is True

    def test_redefine_overwrites_value(self, registry):
        registry.define("k", 1, Plain)
        registry.define("k", 2, Plain)

        assert registry.get_own("k", Plain) == 2
        assert registry.own_keys(Plain) == ["k"]

    def test_member_and_target_metadata_are_separate(self, registry):
        registry.define("k", "member-value", Plain, "m")

        assert registry.has_own("k", Plain) is False
        assert registry.get_own("k", Plain) is None
        assert registry.get_own("k", Plain, "m") == "member-value"

    def test_missing_key_returns_default(self, registry):
        assert registry.get_own("missing", Plain) is None
        assert registry.get_own("missing", Plain, default="fallback") == "fallback"

    def test_stored_none_is_distinguishable(self, registry):
        registry.define("k", None, Plain)

        assert registry.has_own("k", Plain) is True
        assert registry.get_own("k", Plain, default="fallback") is None

    def test_own_keys_keep_first_insertion_order(self, registry):
        for key in ("b", "a", "c", "a", "b"):
            registry.define(key, key.upper(), Plain)

        assert registry.own_keys(Plain) == ["b", "a", "c"]

    def test_non_string_metadata_keys(self, registry):
        key = Symbol("design")
        registry.define(key, "symbol-value", Plain)
        registry.define(42, "int-value", Plain)
        registry.define(("a", 1), "tuple-value", Plain)

        assert registry.get_own(key, Plain) == "symbol-value"
        assert registry.get_own(42, Plain) == "int-value"
        assert registry.get_own(("a", 1), Plain) == "tuple-value"
        assert registry.own_keys(Plain) == [key, 42, ("a", 1)]


class TestDelete:
    """Deletion and pruning of empty containers."""

    def test_delete_round_trip(self, registry):
        registry.define("k", "v", Plain, "m")

        assert registry.delete("k", Plain, "m") is True
        assert registry.has_own("k", Plain, "m") is False

    def test_delete_unknown_key_returns_false(self, registry):
        assert registry.delete("never", Plain) is False
        registry.define("other", 1, Plain)
        assert registry.delete("never", Plain) is False

    def test_delete_prunes_empty_containers(self, registry):
        target = Plain()
        registry.define("k", "v", target, "m")
        assert target in registry

        registry.delete("k", target, "m")

        assert registry.own_keys(target, "m") == []
        assert registry.members(target) == []
        assert target not in registry
        assert len(registry) == 0

    def test_delete_keeps_other_members(self, registry):
        registry.define("k", 1, Plain, "a")
        registry.define("k", 2, Plain, "b")

        registry.delete("k", Plain, "a")

        assert registry.members(Plain) == ["b"]
        assert Plain in registry

    def test_redefine_after_prune_starts_fresh(self, registry):
        registry.define("old", 1, Plain, "m")
        registry.define("k", 1, Plain, "m")
        registry.delete("old", Plain, "m")
        registry.delete("k", Plain, "m")

        registry.define("new", 2, Plain, "m")

        assert registry.own_keys(Plain, "m") == ["new"]

    def test_delete_never_touches_parent(self, registry):
        class Base:
            pass

        class Child(Base):
            pass

        registry.define("k", "base", Base)

        assert registry.delete("k", Child) is False
        assert registry.get_own("k", Base) == "base"


class TestChainWalking:
    """Reads that fall back to parents."""

    def test_get_and_has_walk_to_parent(self, registry):
        class A:
            pass

        class B(A):
            pass

        registry.define("k", "from-a", A)

        assert registry.has("k", B) is True
        assert registry.get("k", B) == "from-a"
        assert registry.has_own("k", B) is False
        assert registry.get_own("k", B) is None

    def test_nearest_definition_wins(self, registry):
        class A:
            pass

        class B(A):
            pass

        class C(B):
            pass

        registry.define("k", "a", A)
        registry.define("k", "b", B)

        assert registry.get("k", C) == "b"

    def test_member_lookup_uses_same_member_on_ancestors(self, registry):
        class A:
            pass

        class B(A):
            pass

        registry.define("k", "a.m", A, "m")

        assert registry.get("k", B, "m") == "a.m"
        assert registry.get("k", B, "other") is None
        assert registry.get("k", B) is None

    def test_instances_inherit_from_their_class(self, registry):
        class Service:
            pass

        registry.define("k", "class-level", Service, "run")

        assert registry.get("k", Service(), "run") == "class-level"

    def test_keys_union_own_first_deduplicated(self, registry):
        class A:
            pass

        class B(A):
            pass

        registry.define("X", 1, B)
        registry.define("Y", 2, B)
        registry.define("Y", 3, A)
        registry.define("Z", 4, A)

        assert registry.keys(B) == ["X", "Y", "Z"]
        assert registry.own_keys(B) == ["X", "Y"]

    def test_keys_follow_mro_for_multiple_inheritance(self, registry):
        class Root:
            pass

        class Left(Root):
            pass

        class Right(Root):
            pass

        class Diamond(Left, Right):
            pass

        registry.define("root", 0, Root)
        registry.define("right", 2, Right)
        registry.define("left", 1, Left)

        assert registry.keys(Diamond) == ["left", "right", "root"]
        assert registry.get("right", Diamond) == 2

    def test_missing_everywhere_returns_default(self, registry):
        class A:
            pass

        assert registry.has("k", A) is False
        assert registry.get("k", A, default="nope") == "nope"
        assert registry.keys(A) == []

    def test_declared_parent_is_walked(self, registry):
        config = Plain()
        defaults = Plain()
        registry.define("timeout", 30, defaults)
        registry.declare_parent(config, defaults)

        assert registry.get("timeout", config) == 30
        assert registry.get_parent(config) is defaults


class TestIdentityAndLifecycle:
    """Identity keyed storage and weak references."""

    def test_equal_but_distinct_targets_do_not_share_metadata(self, registry):
        first = {"a": 1}
        second = {"a": 1}
        registry.define("k", "first", first)

        assert registry.has_own("k", first) is True
        assert registry.has_own("k", second) is False

    def test_unhashable_targets_are_supported(self, registry):
        target = [1, 2, 3]
        registry.define("k", "list", target)

        assert registry.get_own("k", target) == "list"
        assert registry.is_weakly_held(target) is False

    def test_weakly_held_target_is_released(self, registry):
        target = Plain()
        registry.define("k", "v", target)
        assert registry.is_weakly_held(target) is True
        assert len(registry) == 1

        del target
        gc.collect()

        assert len(registry) == 0

    def test_strong_registry_keeps_targets(self):
        registry = MetadataRegistry(weak_references=False)
        target = Plain()
        registry.define("k", "v", target)

        assert registry.is_weakly_held(target) is False

    def test_forget_drops_everything(self, registry):
        target = object()
        registry.define("a", 1, target)
        registry.define("b", 2, target, "m")

        assert registry.forget(target) is True
        assert registry.forget(target) is False
        assert registry.members(target) == []

    def test_clear(self, registry):
        registry.define("a", 1, Plain)
        registry.declare_parent(Plain(), Plain)
        registry.clear()

        assert len(registry) == 0

    def test_members_in_insertion_order(self, registry):
        sym = Symbol("hidden")
        registry.define("k", 1, Plain, "b")
        registry.define("k", 1, Plain)
        registry.define("k", 1, Plain, sym)

        assert registry.members(Plain) == ["b", None, sym]

    def test_unlocked_registry(self):
        registry = MetadataRegistry(thread_safe=False)
        registry.define("k", "v", Plain)

        assert registry.get("k", Plain) == "v"


class TestValidation:
    """Type errors raised before any state change."""

    @pytest.mark.parametrize("target", [None, 1, 2.5, "text", b"bytes", True])
    def test_non_object_targets_are_rejected(self, registry, target):
        with pytest.raises(MetadataTypeError) as exc_info:
            registry.define("k", "v", target)

        assert exc_info.value.error_code == ErrorCode.INVALID_TARGET
        assert len(registry) == 0

    def test_errors_are_type_errors(self, registry):
        with pytest.raises(TypeError):
            registry.get("k", None)

    def test_unhashable_metadata_key_is_rejected(self, registry):
        with pytest.raises(MetadataTypeError) as exc_info:
            registry.define(["not", "hashable"], "v", Plain)

        assert exc_info.value.error_code == ErrorCode.INVALID_METADATA_KEY
        assert Plain not in registry

    def test_member_keys_are_normalized(self, registry):
        registry.define("k", "v", Plain, 7)

        assert registry.get_own("k", Plain, "7") == "v"
        assert registry.members(Plain) == ["7"]

    def test_unconvertible_member_key_is_rejected(self, registry):
        class NoPrimitive:
            def __str__(self):
                return self

        with pytest.raises(MetadataTypeError) as exc_info:
            registry.define("k", "v", Plain, NoPrimitive())

        assert exc_info.value.error_code == ErrorCode.INVALID_MEMBER_KEY


class TestConcurrency:
    """Concurrent writers on one target."""

    def test_parallel_define_and_delete(self, registry):
        from concurrent.futures import ThreadPoolExecutor

        target = Plain()

        def churn(worker: int) -> None:
            for i in range(200):
                registry.define((worker, i), i, target, "m")
            for i in range(200):
                registry.delete((worker, i), target, "m")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(churn, range(8)))

        assert registry.own_keys(target, "m") == []
        assert target not in registry
