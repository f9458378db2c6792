"""Tests for the graph and its topological sort."""

import pytest

from conftest import create_node_content
from conversion_graph.errors import CycleDetectedError
from conversion_graph.graph import Graph


def names(nodes):
    return [node.content.package.name for node in nodes]


@pytest.fixture
def sample_graph():
    """Nodes 0..5 with edges 5->2, 5->0, 4->0, 4->1, 2->3, 3->1."""
    graph = Graph()
    nodes = [graph.add_node(create_node_content(str(i))) for i in range(6)]
    graph.add_edge(nodes[5], nodes[2])
    graph.add_edge(nodes[5], nodes[0])
    graph.add_edge(nodes[4], nodes[0])
    graph.add_edge(nodes[4], nodes[1])
    graph.add_edge(nodes[2], nodes[3])
    graph.add_edge(nodes[3], nodes[1])
    return graph, nodes


class TestGraph:
    """Tests for node and edge insertion."""

    def test_add_node(self):
        graph = Graph()
        node = graph.add_node(create_node_content())

        assert len(graph) == 1
        assert node in graph

    def test_add_node_never_deduplicates(self):
        """Equal content still yields two distinct nodes."""
        graph = Graph()
        first = graph.add_node(create_node_content('same'))
        second = graph.add_node(create_node_content('same'))

        assert first is not second
        assert len(graph.nodes) == 2

    def test_add_edge(self):
        graph = Graph()
        some_node = graph.add_node(create_node_content('some-node'))
        some_edge_node = graph.add_node(create_node_content('some-edge-node'))

        result = graph.add_edge(some_node, some_edge_node)

        assert result is graph
        assert next(iter(graph.nodes)) is some_node
        assert next(iter(some_node.adjacent)) is some_edge_node
        assert some_edge_node.parent is some_node

    def test_edges(self, sample_graph):
        graph, nodes = sample_graph

        edges = [(names([s])[0], names([d])[0]) for s, d in graph.edges]

        assert len(edges) == 6
        assert ('5', '2') in edges
        assert ('3', '1') in edges


class TestTopSort:
    """Tests for Graph.top_sort."""

    def test_leaf_to_root_order(self, sample_graph):
        graph, _ = sample_graph

        assert names(graph.top_sort()) == ['0', '1', '3', '2', '4', '5']

    def test_dependencies_precede_dependents(self, sample_graph):
        graph, _ = sample_graph

        order = graph.top_sort()
        index = {node: i for i, node in enumerate(order)}

        assert len(order) == len(graph)
        assert len(set(order)) == len(graph)
        for source, destination in graph.edges:
            assert index[destination] < index[source]

    def test_unrelated_nodes_keep_insertion_order(self):
        graph = Graph()
        for name in ['c', 'a', 'b']:
            graph.add_node(create_node_content(name))

        assert names(graph.top_sort()) == ['c', 'a', 'b']

    def test_empty_graph(self):
        assert Graph().top_sort() == []

    def test_deep_chain_does_not_hit_recursion_limit(self):
        graph = Graph()
        previous = graph.add_node(create_node_content('0'))
        for i in range(1, 5000):
            current = graph.add_node(create_node_content(str(i)))
            graph.add_edge(previous, current)
            previous = current

        order = graph.top_sort()

        assert names(order)[0] == '4999'
        assert names(order)[-1] == '0'

    def test_cycle_raises_in_strict_mode(self):
        graph = Graph()
        a = graph.add_node(create_node_content('a'))
        b = graph.add_node(create_node_content('b'))
        c = graph.add_node(create_node_content('c'))
        graph.add_edge(a, b).add_edge(b, c).add_edge(c, a)

        with pytest.raises(CycleDetectedError) as exc_info:
            graph.top_sort()

        assert exc_info.value.node_name == 'a'
        assert exc_info.value.cycle == ['a', 'b', 'c', 'a']
        assert 'a -> b -> c -> a' in str(exc_info.value)

    def test_cycle_tolerated_when_not_strict(self):
        """Back edges are ignored and every node is returned once."""
        graph = Graph()
        a = graph.add_node(create_node_content('a'))
        b = graph.add_node(create_node_content('b'))
        graph.add_edge(a, b).add_edge(b, a)

        assert names(graph.top_sort(strict=False)) == ['b', 'a']

    def test_self_loop_is_a_cycle(self):
        graph = Graph()
        a = graph.add_node(create_node_content('a'))
        graph.add_edge(a, a)

        with pytest.raises(CycleDetectedError):
            graph.top_sort()
        assert names(graph.top_sort(strict=False)) == ['a']

    def test_diamond_is_not_a_cycle(self):
        graph = Graph()
        top = graph.add_node(create_node_content('top'))
        left = graph.add_node(create_node_content('left'))
        right = graph.add_node(create_node_content('right'))
        bottom = graph.add_node(create_node_content('bottom'))
        graph.add_edge(top, left).add_edge(top, right)
        graph.add_edge(left, bottom).add_edge(right, bottom)

        assert names(graph.top_sort()) == ['bottom', 'left', 'right', 'top']
