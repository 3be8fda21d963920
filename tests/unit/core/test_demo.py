"""
Unit tests for the demo graph builder.
"""

from neurolayout.core.demo import DemoGraphBuilder
from neurolayout.core.types import NodeType, RelationType


class TestDemoGraphBuilder:
    """Test the generated sample graph."""

    def test_covers_every_node_and_relation_type(self):
        graph = DemoGraphBuilder().build()

        assert {n.type for n in graph.nodes} == set(NodeType) - {NodeType.LOGIC}
        assert {l.type for l in graph.links} == set(RelationType)

    def test_links_reference_existing_nodes(self):
        graph = DemoGraphBuilder().build()
        ids = {n.id for n in graph.nodes}

        for link in graph.links:
            assert link.source in ids and link.target in ids

    def test_seed_controls_attributes(self):
        first = DemoGraphBuilder(seed=1).build()
        second = DemoGraphBuilder(seed=2).build()

        assert [n.id for n in first.nodes] == [n.id for n in second.nodes]
        assert [n.mastery_level for n in first.nodes] != [n.mastery_level for n in second.nodes]

    def test_summary_metrics(self):
        graph = DemoGraphBuilder().build()
        assert 0.0 <= graph.knowledge_health <= 1.0
        assert graph.due_nodes_count == sum(1 for n in graph.nodes if n.mastery_level < 0.25)

    def test_repeated_builds_are_identical(self):
        assert DemoGraphBuilder().build().to_dict() == DemoGraphBuilder().build().to_dict()
