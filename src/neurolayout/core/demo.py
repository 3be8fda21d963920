"""
Demo graph builder.

Builds a small, deterministic knowledge graph that exercises every node
type and relation type, so the CLI and examples show meaningful layouts
without a real graph generator.
"""

import logging
import random
from datetime import datetime, timezone
from typing import List

from .types import Link, NeuralGraph, Node, NodeType, RelationType

logger = logging.getLogger(__name__)


class DemoGraphBuilder:
    """
    Generates a clustered concept graph.

    Each topic becomes a goal node with a ring of concepts and skills around
    it; a few cross-topic similarity and temporal links tie clusters together.
    """

    TOPICS = {
        "python": ["syntax", "generators", "decorators", "asyncio", "typing"],
        "statistics": ["mean", "variance", "bayes", "regression"],
        "memory": ["spacing", "retrieval", "chunking"],
    }

    # Fixed so repeated builds serialize identically
    GENERATED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __init__(self, seed: int = 7):
        self.rng = random.Random(seed)

    def build(self) -> NeuralGraph:
        nodes: List[Node] = []
        links: List[Link] = []
        topic_ids = []

        for topic, concepts in self.TOPICS.items():
            goal_id = f"goal:{topic}"
            topic_ids.append(goal_id)
            nodes.append(self._node(goal_id, topic.title(), NodeType.GOAL, radius=22))

            previous = None
            for index, concept in enumerate(concepts):
                node_type = NodeType.SKILL if index % 2 else NodeType.CONCEPT
                node_id = f"{topic}:{concept}"
                nodes.append(self._node(node_id, concept, node_type))
                links.append(self._link(goal_id, node_id, RelationType.ASSOCIATION))
                if previous is not None:
                    links.append(self._link(previous, node_id, RelationType.PREREQUISITE))
                previous = node_id

            habit_id = f"habit:{topic}"
            nodes.append(self._node(habit_id, f"practice {topic}", NodeType.HABIT, radius=12))
            links.append(self._link(habit_id, goal_id, RelationType.TEMPORAL))

        for a, b in zip(topic_ids, topic_ids[1:]):
            links.append(self._link(a, b, RelationType.SIMILARITY))

        memory_id = "memory:first-program"
        nodes.append(self._node(memory_id, "first program", NodeType.MEMORY))
        links.append(self._link(memory_id, "python:syntax", RelationType.SPATIAL))

        logger.debug(f"Built demo graph with {len(nodes)} nodes and {len(links)} links")
        return NeuralGraph(
            nodes=nodes,
            links=links,
            total_activation_level=sum(n.activation_level for n in nodes),
            knowledge_health=sum(n.mastery_level for n in nodes) / len(nodes),
            due_nodes_count=sum(1 for n in nodes if n.mastery_level < 0.25),
            last_updated=self.GENERATED_AT,
        )

    def _node(self, node_id: str, label: str, node_type: NodeType, radius: float = 15.0) -> Node:
        activation = round(self.rng.random(), 2)
        return Node(
            id=node_id,
            label=label,
            type=node_type,
            radius=radius,
            mastery_level=round(self.rng.random(), 2),
            activation_level=activation,
            cognitive_load=round(self.rng.random(), 2),
            is_active=activation > 0.8,
        )

    def _link(self, source: str, target: str, relation: RelationType) -> Link:
        return Link(
            source=source,
            target=target,
            type=relation,
            strength=round(0.3 + self.rng.random() * 0.7, 2),
            confidence=round(0.5 + self.rng.random() * 0.5, 2),
            activation_count=self.rng.randint(0, 20),
        )
