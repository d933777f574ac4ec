"""
Qubit interaction analysis for blochsim circuits.

The interaction graph has one node per qubit and an edge for every pair
coupled by a two-qubit gate. Qubits in different connected components can
never become entangled, so their reduced states are pure whenever the
gates are unitary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

import networkx as nx

from blochsim.core.io_spec import Circuit


@dataclass
class InteractionEdge:
    """
    Coupling between two qubits.

    Attributes:
        qubit_a: Smaller qubit index
        qubit_b: Larger qubit index
        gate_indices: Positions of the two-qubit gates acting on this pair
    """
    qubit_a: int
    qubit_b: int
    gate_indices: List[int] = field(default_factory=list)

    @property
    def weight(self) -> int:
        return len(self.gate_indices)


@dataclass
class InteractionGraph:
    """
    Qubit coupling graph plus the layered depth of a circuit.

    Attributes:
        num_qubits: Total number of qubits
        edges: Mapping (q1, q2) -> InteractionEdge with q1 < q2
        depth: Number of layers when gates on disjoint qubits run in parallel
    """
    num_qubits: int
    edges: Dict[Tuple[int, int], InteractionEdge] = field(default_factory=dict)
    depth: int = 0
    _graph: Optional[nx.Graph] = field(default=None, repr=False)

    def __post_init__(self):
        self._rebuild_graph()

    def _rebuild_graph(self):
        self._graph = nx.Graph()
        self._graph.add_nodes_from(range(self.num_qubits))
        for (qa, qb), edge in self.edges.items():
            self._graph.add_edge(qa, qb, weight=edge.weight)

    @classmethod
    def from_circuit(cls, circuit: Circuit) -> InteractionGraph:
        graph = cls(num_qubits=circuit.num_qubits)
        layer_on_qubit: Dict[int, int] = {}

        for index, gate in enumerate(circuit.gates):
            layer = max((layer_on_qubit.get(q, 0) for q in gate.qubits), default=0) + 1
            for q in gate.qubits:
                layer_on_qubit[q] = layer
            graph.depth = max(graph.depth, layer)

            if len(gate.qubits) == 2:
                graph.add_edge(gate.qubits[0], gate.qubits[1], gate_index=index)

        return graph

    def add_edge(self, qubit_a: int, qubit_b: int, gate_index: Optional[int] = None) -> InteractionEdge:
        key = (min(qubit_a, qubit_b), max(qubit_a, qubit_b))
        edge = self.edges.get(key)
        if edge is None:
            edge = InteractionEdge(qubit_a=key[0], qubit_b=key[1])
            self.edges[key] = edge
        if gate_index is not None:
            edge.gate_indices.append(gate_index)
        self._graph.add_edge(key[0], key[1], weight=edge.weight)
        return edge

    def has_edge(self, qubit_a: int, qubit_b: int) -> bool:
        return (min(qubit_a, qubit_b), max(qubit_a, qubit_b)) in self.edges

    def neighbors(self, qubit: int) -> Set[int]:
        return set(self._graph.neighbors(qubit))

    def degree(self, qubit: int) -> int:
        return self._graph.degree(qubit)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    def entangled_groups(self) -> List[List[int]]:
        """Connected groups of qubits, each sorted, ordered by smallest qubit."""
        groups = [sorted(component) for component in nx.connected_components(self._graph)]
        return sorted(groups, key=lambda group: group[0])

    def is_isolated(self, qubit: int) -> bool:
        """True if no two-qubit gate touches ``qubit``."""
        return self._graph.degree(qubit) == 0
