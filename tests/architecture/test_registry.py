"""Tests for ModuleRegistry creation, resolution and sealing."""

from clean_arch.architecture import (
    GLOBAL,
    PRIMITIVES,
    UNDEFINED,
    ModuleRegistry,
    Path,
    Resolved,
    Restrictions,
    SealedModuleRegistry,
    UnitKind,
    Unmatched,
)


class TestGetOrCreate:
    def test_idempotent(self, registry):
        first = registry.get_or_create("Core")
        assert registry.get_or_create("Core") is first
        assert len(registry) == 1
        assert "Core" in registry

    def test_default_name_is_undefined(self, registry):
        assert registry.get_or_create().name == UNDEFINED

    def test_paths_are_unioned(self, registry):
        registry.get_or_create("Core", root_paths=[Path(namespace="app.core")])
        module = registry.get_or_create(
            "Core",
            root_paths=[Path(namespace="app.core"), Path(namespace="lib.core")],
            excluded_paths=[Path(path="/legacy")],
        )
        assert module.root_paths == [Path(namespace="app.core"), Path(namespace="lib.core")]
        assert module.excluded_paths == [Path(path="/legacy")]

    def test_restrictions_replaced_only_when_given(self, registry):
        restrictions = Restrictions(max_allowable_distance=0.3)
        module = registry.get_or_create("Core", restrictions=restrictions)
        registry.get_or_create("Core")
        assert module.restrictions is restrictions
        replacement = Restrictions()
        registry.get_or_create("Core", restrictions=replacement)
        assert module.restrictions is replacement

    def test_primitives_and_global_excluded_from_analysis(self, registry):
        assert not registry.get_or_create(PRIMITIVES).is_enabled_for_analysis
        assert not registry.get_or_create(GLOBAL).is_enabled_for_analysis
        assert registry.get_or_create(UNDEFINED).is_enabled_for_analysis

    def test_creation_order(self, registry):
        for name in ("B", "A", "C"):
            registry.get_or_create(name)
        assert [m.name for m in registry] == ["B", "A", "C"]


class TestResolve:
    def test_resolved(self, registry, arena):
        core = registry.get_or_create("Core", root_paths=[Path(namespace="app.core")])
        resolution = registry.resolve(arena.get_or_create("app.core.Service"))
        assert resolution == Resolved(core)

    def test_unmatched(self, registry, arena):
        registry.get_or_create("Core", root_paths=[Path(namespace="app.core")])
        unit = arena.get_or_create("vendor.lib.Thing")
        assert registry.resolve(unit) == Unmatched(unit)

    def test_first_match_wins(self, registry, arena):
        outer = registry.get_or_create("Outer", root_paths=[Path(namespace="app")])
        registry.get_or_create("Inner", root_paths=[Path(namespace="app.core")])
        assert registry.resolve(arena.get_or_create("app.core.Service")).module is outer

    def test_excluded_units_fall_through(self, registry, arena):
        registry.get_or_create(
            "Core",
            root_paths=[Path(namespace="app")],
            excluded_paths=[Path(namespace="app.legacy")],
        )
        legacy = registry.get_or_create("Legacy", root_paths=[Path(namespace="app.legacy")])
        assert registry.resolve(arena.get_or_create("app.legacy.Old")).module is legacy

    def test_primitive_and_global_sentinels(self, registry, arena):
        registry.get_or_create("Everything", root_paths=[Path(namespace="")])
        primitive = arena.get_or_create("int", kind=UnitKind.PRIMITIVE)
        global_name = arena.get_or_create("Helper")
        assert registry.resolve(primitive).module.name == PRIMITIVES
        assert registry.resolve(global_name).module.name == GLOBAL

    def test_module_for_unit_falls_back_to_undefined(self, registry, arena):
        module = registry.module_for_unit(arena.get_or_create("vendor.lib.Thing"))
        assert module.name == UNDEFINED
        assert module.is_enabled_for_analysis


class TestAssign:
    def test_assign_caches_module_and_membership(self, registry, arena):
        core = registry.get_or_create("Core", root_paths=[Path(namespace="app.core")])
        unit = arena.get_or_create("app.core.Service")
        assert registry.assign(unit) is core
        assert unit.module is core
        assert unit.belongs_to_module(core)
        assert unit in core

    def test_assign_twice_keeps_single_membership(self, registry, arena):
        core = registry.get_or_create("Core", root_paths=[Path(namespace="app.core")])
        unit = arena.get_or_create("app.core.Service")
        registry.assign(unit)
        registry.assign(unit)
        assert len(core) == 1


class TestSeal:
    def test_sealed_view_is_read_only(self):
        registry = ModuleRegistry()
        core = registry.get_or_create("Core")
        sealed = registry.seal()
        assert isinstance(sealed, SealedModuleRegistry)
        assert not hasattr(sealed, "get_or_create")
        assert sealed.find_by_name("Core") is core
        assert sealed.all() == [core]
        assert "Core" in sealed
        assert len(sealed) == 1

    def test_later_registration_not_visible(self):
        registry = ModuleRegistry()
        registry.get_or_create("Core")
        sealed = registry.seal()
        registry.get_or_create("Api")
        assert sealed.find_by_name("Api") is None
        assert [m.name for m in sealed] == ["Core"]
