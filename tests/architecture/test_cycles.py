"""Tests for SCC detection and cycle collection across modules."""

from clean_arch.architecture import find_cyclic_dependencies, tarjan_scc


class TestTarjanSCC:
    def test_simple_cycle(self):
        adjacency = {"a": ["b"], "b": ["c"], "c": ["a"]}
        sccs = list(tarjan_scc(adjacency, adjacency.keys()))
        assert {"a", "b", "c"} in sccs

    def test_dag_has_only_singletons(self):
        adjacency = {"a": ["b"], "b": ["c"], "c": []}
        sccs = list(tarjan_scc(adjacency, adjacency.keys()))
        assert all(len(component) == 1 for component in sccs)
        assert len(sccs) == 3

    def test_edges_to_unknown_nodes_ignored(self):
        adjacency = {"a": ["z"], "z": ["a"]}
        sccs = list(tarjan_scc(adjacency, ["a"]))
        assert sccs == [{"a"}]

    def test_deep_chain(self):
        # Deeper than the default recursion limit
        n = 5000
        adjacency = {str(i): [str(i + 1)] for i in range(n)}
        adjacency[str(n)] = ["0"]
        sccs = list(tarjan_scc(adjacency, adjacency.keys()))
        assert len(sccs) == 1
        assert len(sccs[0]) == n + 1

    def test_components_yielded_lazily(self):
        adjacency = {"a": ["b"], "b": ["a", "c"], "c": []}
        components = tarjan_scc(adjacency, adjacency.keys())
        assert next(components) == {"c"}
        assert next(components) == {"a", "b"}
        assert next(components, None) is None


class TestFindCyclicDependencies:
    def test_only_cyclic_modules_reported(self, make_partition):
        registry, _ = make_partition(
            modules=[("A", "pkg_a", None), ("B", "pkg_b", None), ("C", "pkg_c", None)],
            edges=[
                ("pkg_a.U", "pkg_b.U"),
                ("pkg_b.U", "pkg_c.U"),
                ("pkg_c.U", "pkg_b.V"),
            ],
        )
        cycles = find_cyclic_dependencies(registry.all())
        assert set(cycles) == {"B", "C"}
        assert [[m.name for m in cycle] for cycle in cycles["B"]] == [["B", "C", "B"]]

    def test_matches_per_module_search(self, make_partition):
        registry, _ = make_partition(
            modules=[("A", "pkg_a", None), ("B", "pkg_b", None), ("C", "pkg_c", None)],
            edges=[
                ("pkg_a.U", "pkg_b.U"),
                ("pkg_a.U", "pkg_c.U"),
                ("pkg_b.U", "pkg_a.V"),
                ("pkg_c.U", "pkg_b.W"),
            ],
        )
        cycles = find_cyclic_dependencies(registry.all())
        for module in registry:
            assert cycles.get(module.name, []) == module.get_cyclic_dependencies()

    def test_acyclic(self, make_partition):
        registry, _ = make_partition(
            modules=[("A", "pkg_a", None), ("B", "pkg_b", None)],
            edges=[("pkg_a.U", "pkg_b.U")],
        )
        assert find_cyclic_dependencies(registry.all()) == {}
