"""Tests for Module membership, aggregation, restrictions and cycles."""

import pytest

from clean_arch.architecture import (
    GLOBAL,
    PRIMITIVES,
    UNDEFINED,
    Module,
    Path,
    Restrictions,
    UnitKind,
    UnitOfCode,
)


class TestContainment:
    def test_contains_root(self):
        module = Module("Core", root_paths=[Path(namespace="app.core")])
        assert module.contains(UnitOfCode(0, "app.core.Service"))
        assert not module.contains(UnitOfCode(1, "app.api.View"))

    def test_excluded_path(self):
        module = Module(
            "Core",
            root_paths=[Path(path="/app/core")],
            excluded_paths=[Path(path="/app/core/legacy")],
        )
        assert module.contains(UnitOfCode(0, "x.A", "/app/core/service.py"))
        assert not module.contains(UnitOfCode(1, "x.B", "/app/core/legacy/old.py"))
        # Plain prefix: legacy_v2 is excluded too
        assert module.is_excluded(UnitOfCode(2, "x.C", "/app/core/legacy_v2/new.py"))

    def test_paths_deduplicated(self):
        module = Module("Core")
        module.add_root_path(Path(namespace="app.core"))
        module.add_root_path(Path(namespace="app.core"))
        module.add_excluded_path(Path(path="/x"))
        module.add_excluded_path(Path(path="/x"))
        assert module.root_paths == [Path(namespace="app.core")]
        assert module.excluded_paths == [Path(path="/x")]

    def test_membership(self):
        module = Module("Core")
        unit = UnitOfCode(0, "app.core.Service")
        module.add_unit_of_code(unit)
        module.add_unit_of_code(unit)
        assert unit in module
        assert len(module) == 1
        module.remove_unit_of_code(unit)
        assert unit not in module
        assert module.units_of_code == []

    def test_sentinels(self):
        assert Module(UNDEFINED).is_undefined()
        assert Module(PRIMITIVES).is_primitives()
        assert Module(GLOBAL).is_global()
        assert not Module("Core").is_sentinel()


@pytest.fixture
def layered(make_partition):
    """Core forbids Api; Core -> Api and Api -> Core."""
    return make_partition(
        modules=[
            ("Core", "app.core", Restrictions.from_lists(forbidden=["Api"])),
            ("Api", "app.api", Restrictions(private_units=["app.api.internal.*"])),
        ],
        edges=[
            ("app.core.Service", "app.api.Controller"),
            ("app.core.Service", "app.core.Repo"),
            ("app.core.Service", "int"),
            ("app.core.Service", "Helper"),
            ("app.api.Controller", "app.core.Service"),
            ("app.api.Controller", "app.api.internal.Cache"),
        ],
        units={"int": (UnitKind.PRIMITIVE, None)},
    )


class TestAggregation:
    """Module-level views of unit edges."""

    def test_units_partitioned(self, layered):
        registry, arena = layered
        core = registry.find_by_name("Core")
        assert sorted(u.name for u in core.units_of_code) == ["app.core.Repo", "app.core.Service"]
        assert arena.find("int").module is registry.find_by_name(PRIMITIVES)
        assert arena.find("Helper").module is registry.find_by_name(GLOBAL)

    def test_every_unit_in_exactly_one_module(self, layered):
        registry, arena = layered
        for unit in arena:
            owners = [m for m in registry if unit in m]
            assert owners == [unit.module]

    def test_dependency_modules_skip_primitives_and_globals(self, layered):
        registry, _ = layered
        core = registry.find_by_name("Core")
        assert [m.name for m in core.get_dependency_modules()] == ["Api"]

    def test_dependent_modules(self, layered):
        registry, _ = layered
        core = registry.find_by_name("Core")
        api = registry.find_by_name("Api")
        assert core.get_dependent_modules() == [api]
        assert api.get_dependent_modules() == [core]

    def test_dependency_and_dependent_units(self, layered):
        registry, _ = layered
        core = registry.find_by_name("Core")
        api = registry.find_by_name("Api")
        assert [u.name for u in core.get_dependency_units_of_code(api)] == ["app.api.Controller"]
        assert [u.name for u in core.get_dependent_units_of_code(api)] == ["app.core.Service"]
        assert [u.name for u in api.get_dependency_units_of_code(core)] == ["app.core.Service"]


class TestRestrictionQueries:
    def test_illegal_dependency_modules(self, layered):
        registry, _ = layered
        core = registry.find_by_name("Core")
        api = registry.find_by_name("Api")
        assert core.get_illegal_dependency_modules() == [api]
        assert api.get_illegal_dependency_modules() == []

    def test_illegal_units_of_forbidden_module(self, layered):
        registry, _ = layered
        core = registry.find_by_name("Core")
        assert [u.name for u in core.get_illegal_dependency_units_of_code()] == ["app.api.Controller"]
        assert core.get_illegal_dependency_units_of_code(only_from_allowed_modules=True) == []

    def test_private_units_of_allowed_module(self, make_partition):
        registry, _ = make_partition(
            modules=[
                ("Core", "app.core", None),
                ("Api", "app.api", Restrictions(private_units=["app.api.internal.*"])),
            ],
            edges=[
                ("app.core.Service", "app.api.internal.Cache"),
                ("app.core.Service", "app.api.Client"),
            ],
        )
        core = registry.find_by_name("Core")
        private = core.get_illegal_dependency_units_of_code(only_from_allowed_modules=True)
        assert [u.name for u in private] == ["app.api.internal.Cache"]
        assert [u.name for u in core.get_illegal_dependency_units_of_code()] == ["app.api.internal.Cache"]

    def test_own_private_units_are_fine(self, layered):
        registry, _ = layered
        api = registry.find_by_name("Api")
        assert api.get_illegal_dependency_units_of_code() == []


class TestCycles:
    """Depth-first search reporting cycles that close on the root."""

    def test_two_module_cycle(self, layered):
        registry, _ = layered
        core = registry.find_by_name("Core")
        api = registry.find_by_name("Api")
        assert core.get_cyclic_dependencies() == [[core, api, core]]
        assert api.get_cyclic_dependencies() == [[api, core, api]]

    def test_cycle_not_through_root_is_not_reported(self, make_partition):
        registry, _ = make_partition(
            modules=[
                ("A", "pkg_a", None),
                ("B", "pkg_b", None),
                ("C", "pkg_c", None),
            ],
            edges=[
                ("pkg_a.U", "pkg_b.U"),
                ("pkg_b.U", "pkg_c.U"),
                ("pkg_c.U", "pkg_b.V"),
            ],
        )
        a, b, c = (registry.find_by_name(n) for n in "ABC")
        assert a.get_cyclic_dependencies() == []
        assert b.get_cyclic_dependencies() == [[b, c, b]]
        assert c.get_cyclic_dependencies() == [[c, b, c]]

    def test_acyclic(self, make_partition):
        registry, _ = make_partition(
            modules=[("A", "pkg_a", None), ("B", "pkg_b", None)],
            edges=[("pkg_a.U", "pkg_b.U")],
        )
        assert registry.find_by_name("A").get_cyclic_dependencies() == []
        assert registry.find_by_name("B").get_cyclic_dependencies() == []

    def test_cycles_start_and_end_with_root(self, make_partition):
        registry, _ = make_partition(
            modules=[("A", "pkg_a", None), ("B", "pkg_b", None), ("C", "pkg_c", None)],
            edges=[
                ("pkg_a.U", "pkg_b.U"),
                ("pkg_a.U", "pkg_c.U"),
                ("pkg_b.U", "pkg_a.V"),
                ("pkg_c.U", "pkg_b.W"),
            ],
        )
        a = registry.find_by_name("A")
        cycles = a.get_cyclic_dependencies()
        assert [[m.name for m in cycle] for cycle in cycles] == [["A", "B", "A"], ["A", "C", "B", "A"]]


class TestModuleMetrics:
    """A, I, D, overage and primitiveness on a known module."""

    @pytest.fixture
    def core(self, make_partition):
        registry, _ = make_partition(
            modules=[
                ("Core", "app.core", Restrictions(max_allowable_distance=0.1)),
                ("Api", "app.api", None),
            ],
            edges=[
                ("app.api.X", "app.core.A"),
                ("app.core.B", "app.api.P"),
                ("app.core.B", "app.api.Q"),
                ("app.core.B", "vendor.R"),
                ("app.core.B", "int"),
                ("app.core.B", "app.core.A"),
            ],
            units={
                "app.core.A": (UnitKind.INTERFACE, True),
                "app.core.B": (UnitKind.CLASS, False),
                "app.core.C": (UnitKind.FUNCTION, None),
                "int": (UnitKind.PRIMITIVE, None),
            },
        )
        return registry.find_by_name("Core")

    def test_abstractness_skips_unknown(self, core):
        assert core.calculate_abstractness_rate() == 0.5

    def test_instability(self, core):
        # FanIn {app.api.X}, FanOut {P, Q, vendor.R}
        assert core.calculate_instability_rate() == 0.75

    def test_distance(self, core):
        assert core.calculate_distance_rate() == 0.25
        assert core.calculate_distance_rate_overage() == 0.15

    def test_primitiveness(self, core):
        # Per unit: A 0, B 1/5, C 0
        assert core.calculate_primitiveness_rate() == 0.067

    def test_empty_module(self):
        module = Module("Empty")
        assert module.calculate_abstractness_rate() == 0.0
        assert module.calculate_instability_rate() == 0.0
        assert module.calculate_distance_rate() == 1.0
        assert module.calculate_primitiveness_rate() == 0.0
