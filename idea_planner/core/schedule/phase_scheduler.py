from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from idea_planner.core.errors import IntegrityError
from idea_planner.core.model import Phase, PlanNode

logger = logging.getLogger(__name__)


DEFAULT_PHASE_COUNT = 3
DEFAULT_PHASE_NAMES: tuple[str, ...] = ("Foundation & Design", "Core Development", "Testing & Deployment")


def compute_layers(nodes: Iterable[PlanNode]) -> dict[str, int]:
    """Return node id -> layer (topological depth).

    layer = 0 without dependencies, else 1 + max(layer of each dependency).
    Raises IntegrityError for unresolved dependencies and for cycles.
    """

    node_list = list(nodes)
    deps_by_id: dict[str, tuple[str, ...]] = {n.id: n.dependencies for n in node_list}
    index_by_id: dict[str, int] = {}
    for i, n in enumerate(node_list):
        index_by_id.setdefault(n.id, i)

    WHITE, GRAY, BLACK = 0, 1, 2
    state: dict[str, int] = {nid: WHITE for nid in deps_by_id}
    layers: dict[str, int] = {}

    # Iterative DFS: frames hold (node id, next dependency position) so deep
    # chains do not hit the interpreter recursion limit.
    for n in node_list:
        if state[n.id] != WHITE:
            continue
        state[n.id] = GRAY
        stack: list[str] = [n.id]
        frames: list[list] = [[n.id, 0]]
        while frames:
            frame = frames[-1]
            u, di = frame[0], frame[1]
            deps = deps_by_id[u]
            if di < len(deps):
                frame[1] = di + 1
                v = deps[di]
                if v not in state:
                    raise IntegrityError(
                        code="E_UNKNOWN_DEPENDENCY",
                        message=f"{u} depends on unknown id: {v}",
                        path=f"nodes[{index_by_id[u]}].dependencies[{di}]",
                    )
                if state[v] == GRAY:
                    cycle = stack[stack.index(v):] + [v]
                    raise IntegrityError(
                        code="E_DEPENDENCY_CYCLE",
                        message="dependency cycle detected: " + " -> ".join(cycle),
                        path=f"nodes[{index_by_id[u]}].dependencies",
                    )
                if state[v] == WHITE:
                    state[v] = GRAY
                    stack.append(v)
                    frames.append([v, 0])
                continue

            frames.pop()
            stack.pop()
            state[u] = BLACK
            layers[u] = max((layers[d] + 1 for d in deps), default=0)

    return layers


def schedule_phases(
    nodes: Sequence[PlanNode],
    phase_count: int = DEFAULT_PHASE_COUNT,
    names: Optional[Sequence[str]] = None,
) -> tuple[Phase, ...]:
    """Bucket nodes into `phase_count` ordered phases by dependency depth.

    phase index = min(layer, phase_count - 1), so every node lands in exactly
    one phase and never before any of its dependencies. Within a phase nodes
    keep their input order. Empty phases are still returned.
    """

    if phase_count < 1:
        raise ValueError(f"phase_count must be >= 1, got {phase_count}")

    phase_names = list(names) if names is not None else _default_names(phase_count)
    if len(phase_names) != phase_count:
        raise ValueError(f"expected {phase_count} phase names, got {len(phase_names)}")

    layers = compute_layers(nodes)
    logger.debug("node layers: %s", layers)

    buckets: list[list[PlanNode]] = [[] for _ in range(phase_count)]
    for n in nodes:
        buckets[min(layers[n.id], phase_count - 1)].append(n)

    return tuple(
        Phase(index=i, name=phase_names[i], nodes=tuple(bucket)) for i, bucket in enumerate(buckets)
    )


def _default_names(phase_count: int) -> list[str]:
    if phase_count == len(DEFAULT_PHASE_NAMES):
        return list(DEFAULT_PHASE_NAMES)
    return [f"Phase {i}" for i in range(1, phase_count + 1)]
