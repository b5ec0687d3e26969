"""Tests for payload migration across versions."""

from __future__ import annotations

import pytest


class TestObject:
    """Object whose field map uses the pre-2018 shape."""

    __test__ = False

    def __init__(self, b):
        self.B = b

    def data(self):
        return {"B": self.B}


class Declared:
    """Object declaring its type name explicitly."""

    type_name = "TestObject"

    def data(self):
        return {"B": "Bar"}


class Other:
    def data(self):
        return {"B": "Baz"}


class Broken:
    def data(self):
        raise RuntimeError("backing store unavailable")


class TestTypeName:
    """Tests for type name discovery."""

    def test_class_name(self):
        from pinned.core.versioning import type_name_of

        assert type_name_of(TestObject("Foo")) == "TestObject"

    def test_declared_type_name(self):
        from pinned.core.versioning import type_name_of

        assert type_name_of(Declared()) == "TestObject"

    def test_migratable_protocol(self):
        from pinned.core.versioning import Migratable

        assert isinstance(TestObject("Foo"), Migratable)
        assert not isinstance(object(), Migratable)


class TestVersionManagerApply:
    """Tests for VersionManager.apply."""

    def test_apply_rename(self):
        """Test a later version's rename is applied."""
        from pinned.core.versioning import Change, Version, VersionManager

        def action(m):
            m["A"] = m["B"]
            del m["B"]
            return m

        vm = VersionManager()
        version = vm.add(Version(date="2017-01-02"))
        vm.add(
            Version(
                date="2018-01-02",
                changes=[Change(description="Foobar.", actions={"TestObject": action})],
            )
        )

        res = vm.apply(version, TestObject("Foo"))

        assert res == {"A": "Foo"}

    def test_apply_latest_is_unchanged(self, catalog):
        """Test applying from the latest version returns the original map."""
        res = catalog.apply(catalog.latest(), TestObject("Foo"))

        assert res == {"B": "Foo"}

    def test_apply_from_oldest(self, catalog):
        """Test versions without actions are skipped."""
        res = catalog.apply(catalog.find("2016-01-02"), TestObject("Foo"))

        assert res == {"A": "Foo"}

    def test_apply_declared_type_name(self, catalog):
        """Test an explicitly declared type name selects actions."""
        res = catalog.apply(catalog.find("2017-01-02"), Declared())

        assert res == {"A": "Bar"}

    def test_apply_unregistered_type(self, catalog):
        """Test objects without registered actions pass through."""
        res = catalog.apply(catalog.find("2016-01-02"), Other())

        assert res == {"B": "Baz"}

    def test_apply_chronological_order(self):
        """Test transforms compose oldest first, changes in recorded order."""
        from pinned.core.versioning import Change, Version, VersionManager

        calls = []

        def step(name):
            def action(m):
                calls.append(name)
                m.setdefault("trail", []).append(name)
                return m
            return action

        vm = VersionManager()
        # Registered out of order on purpose
        vm.add(Version(date="2019-01-01", changes=[Change("c", {"TestObject": step("2019")})]))
        start = vm.add(Version(date="2016-01-01"))
        vm.add(
            Version(
                date="2017-01-01",
                changes=[
                    Change("a", {"TestObject": step("2017-a")}),
                    Change("ignored", {"Other": step("other")}),
                    Change("b", {"TestObject": step("2017-b")}),
                ],
            )
        )
        vm.add(Version(date="2018-01-01", changes=[Change("docs only")]))

        res = vm.apply(start, TestObject("Foo"))

        assert calls == ["2017-a", "2017-b", "2019"]
        assert res["trail"] == ["2017-a", "2017-b", "2019"]

    def test_apply_starts_strictly_after_version(self):
        """Test the starting version's own changes are not applied."""
        from pinned.core.versioning import Change, Version, VersionManager, rename

        vm = VersionManager()
        vm.add(Version(date="2017-01-01", changes=[Change("x", {"TestObject": rename("B", "X")})]))
        start = vm.find("2017-01-01")
        vm.add(Version(date="2018-01-01", changes=[Change("a", {"TestObject": rename("B", "A")})]))

        assert vm.apply(start, TestObject("Foo")) == {"A": "Foo"}

    def test_apply_does_not_mutate_source(self, catalog):
        """Test transforms work on a copy of the object's map."""
        source = {"B": "Foo"}

        class Shared:
            type_name = "TestObject"

            def data(self):
                return source

        res = catalog.apply(catalog.find("2017-01-02"), Shared())

        assert res == {"A": "Foo"}
        assert source == {"B": "Foo"}

    def test_apply_uncopyable_values(self, catalog):
        """Test values that cannot be copied pass through untouched."""
        import threading

        lock = threading.Lock()

        class Holder:
            type_name = "TestObject"

            def data(self):
                return {"B": "Foo", "lock": lock}

        assert catalog.apply(catalog.latest(), Holder()) == {"B": "Foo", "lock": lock}
        res = catalog.apply(catalog.find("2016-01-02"), Holder())
        assert res["A"] == "Foo"
        assert res["lock"] is lock

    def test_apply_type_name_resolved_once(self, catalog):
        """Test the type name is looked up once per apply."""
        lookups = []

        class Counted:
            @property
            def type_name(self):
                lookups.append(1)
                return "TestObject"

            def data(self):
                return {"B": "Foo"}

        catalog.apply(catalog.latest(), Counted())
        catalog.apply(catalog.find("2016-01-02"), Counted())

        assert len(lookups) == 2

    def test_apply_unknown_version(self, catalog):
        """Test applying from a version outside the catalog is rejected."""
        from pinned.core.errors import InvalidVersionError
        from pinned.core.versioning import Version

        with pytest.raises(InvalidVersionError):
            catalog.apply(Version(date="2000-01-02"), TestObject("Foo"))

    def test_apply_propagates_data_errors(self, catalog):
        """Test errors from the object's data are not swallowed."""
        with pytest.raises(RuntimeError, match="backing store"):
            catalog.apply(catalog.find("2016-01-02"), Broken())

    def test_migration_chain(self, catalog):
        """Test the chain apply would run."""
        assert len(catalog.migration_chain(catalog.find("2016-01-02"), "TestObject")) == 1
        assert catalog.migration_chain(catalog.latest(), "TestObject") == []
        assert catalog.migration_chain(catalog.find("2016-01-02"), "Other") == []

    def test_newer_than(self, catalog):
        """Test newer versions are listed oldest first."""
        newer = catalog.newer_than(catalog.find("2016-01-02"))

        assert [v.date for v in newer] == ["2017-01-02", "2018-01-02"]


class TestSchemaTransformBuilder:
    """Tests for composed field-map transforms."""

    def test_rename_field(self):
        from pinned.core.versioning import SchemaTransformBuilder

        action = SchemaTransformBuilder().rename_field("B", "A").build()

        assert action({"B": 1, "C": 2}) == {"A": 1, "C": 2}
        assert action({"C": 2}) == {"C": 2}

    def test_add_and_remove_field(self):
        from pinned.core.versioning import SchemaTransformBuilder

        action = (
            SchemaTransformBuilder()
            .add_field("tags", [])
            .remove_field("legacy")
            .build()
        )

        first = action({"legacy": True})
        second = action({"tags": ["x"]})

        assert first == {"tags": []}
        assert second == {"tags": ["x"]}
        first["tags"].append("y")
        assert action({}) == {"tags": []}

    def test_transform_field(self):
        from pinned.core.versioning import SchemaTransformBuilder

        action = SchemaTransformBuilder().transform_field("amount", lambda v: int(v * 100)).build()

        assert action({"amount": 1.5}) == {"amount": 150}
        assert action({}) == {}

    def test_nest_and_flatten(self):
        from pinned.core.versioning import SchemaTransformBuilder

        nest = SchemaTransformBuilder().nest_fields("address", ["city", "zip"]).build()
        flatten = SchemaTransformBuilder().flatten_fields("address", prefix="address_").build()

        nested = nest({"name": "n", "city": "c", "zip": "z"})
        assert nested == {"name": "n", "address": {"city": "c", "zip": "z"}}
        assert flatten(nested) == {"name": "n", "address_city": "c", "address_zip": "z"}

    def test_builder_action_in_catalog(self):
        """Test builder output works as a change action."""
        from pinned.core.versioning import Change, SchemaTransformBuilder, Version, VersionManager

        vm = VersionManager()
        start = vm.add(Version(date="2017-01-02"))
        vm.add(
            Version(
                date="2018-01-02",
                changes=[
                    Change(
                        "Rename B to A, add status.",
                        {
                            "TestObject": SchemaTransformBuilder()
                            .rename_field("B", "A")
                            .add_field("status", "active")
                            .build()
                        },
                    )
                ],
            )
        )

        assert vm.apply(start, TestObject("Foo")) == {"A": "Foo", "status": "active"}
