"""Animation graph reconciliation.

Merges the clips of an import into the named-state graph at the configured
path. A state whose name matches a frame tag gets the tag's clip as its
motion; everything else (other states, transitions, sub-machines, layers)
is left as the user made it. States are never removed.
"""

import logging

from spriteforge.assets import AnimationGraph, GraphState, StateMachine
from spriteforge.exceptions import DuplicateStateName, NoGraphOutputConfigured

from .context import ImportContext

logger = logging.getLogger(__name__)


def populate_state_table(table: dict[str, GraphState], machine: StateMachine,
                         context: ImportContext | None = None) -> None:
    """
    Index states by name, walking nested sub-machines.

    Own states are visited before the states of sub-machines; of two states
    with the same name the first one visited stays in the table.

    Args:
        table: Name -> state, filled in place
        machine: State machine to walk
        context: If given, duplicates are reported on it
    """
    for state in machine.states:
        if state.name in table:
            issue = DuplicateStateName(state.name)
            if context is not None:
                context.report(issue)
            else:
                logger.warning(str(issue))
        else:
            table[state.name] = state

    for sub_machine in machine.state_machines:
        populate_state_table(table, sub_machine, context)


def generate_graph(context: ImportContext) -> None:
    """Locate or create the animation graph and bind every clip to a state."""
    if context.graph_path is None:
        context.report(NoGraphOutputConfigured())
        return

    store = context.store
    graph = store.load_at(context.graph_path, AnimationGraph)
    if graph is None:
        graph = AnimationGraph(name=context.file_stem)
        store.create(graph, context.graph_path)
        logger.debug(f"Created animation graph {context.graph_path}")
    context.graph = graph

    root_machine = graph.layers[0].state_machine
    state_map: dict[str, GraphState] = {}
    populate_state_table(state_map, root_machine, context)

    for tag, clip in context.clips.items():
        state = state_map.get(tag.name)
        if state is None:
            state = root_machine.add_state(tag.name)
            state_map[tag.name] = state
        state.motion = context.clip_paths[tag]

    store.mark_dirty(graph)
