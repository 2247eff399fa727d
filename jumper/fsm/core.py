# Lightweight FSM in the spirit of the 'transitions' library
# https://github.com/pytransitions/transitions

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from graphviz import Digraph

logger = logging.getLogger(__name__)

Callback = Callable[["EventData"], Any]
Listener = Callable[[Enum | str, Enum | str], None]


class MachineError(RuntimeError):
    """Raised when the state machine is driven while it is already transitioning."""


def _key(value: str | Enum) -> str:
    return value.name if isinstance(value, Enum) else str(value)


def _listify(value: Optional[Callback | Sequence[Callback]]) -> List[Callback]:
    if value is None:
        return []
    if callable(value):
        return [value]
    return list(value)


class State:
    def __init__(self, name: str | Enum) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return _key(self._name)

    @property
    def value(self) -> Enum | str:
        return self._name

    def __repr__(self) -> str:
        return f"State({self.name})"


class EventData:
    """What a transition callback gets to see: the machine, the trigger and both ends."""

    def __init__(self, machine: "Machine", trigger: str, source: State, dest: State) -> None:
        self.machine = machine
        self.trigger = trigger
        self.source = source
        self.dest = dest


class Transition:
    """
    Directed edge between two states.

    ``before`` callbacks run while the machine is still in the source state,
    ``after`` callbacks once listeners have seen the new state.
    """

    def __init__(
        self,
        source: str,
        dest: str,
        *,
        before: Optional[Callback | Sequence[Callback]] = None,
        after: Optional[Callback | Sequence[Callback]] = None,
    ) -> None:
        self.source = source
        self.dest = dest
        self.before = _listify(before)
        self.after = _listify(after)

    def execute(self, machine: "Machine", trigger: str) -> None:
        data = EventData(machine, trigger, machine.current_state, machine.get_state(self.dest))
        for callback in self.before:
            callback(data)
        machine._change_state(data.dest)
        for callback in self.after:
            callback(data)


class Machine:
    """
    Deterministic finite state machine.

    States and triggers may be given as plain strings or as ``Enum`` members.
    Each trigger has at most one transition per source state. Triggers are not
    re-entrant: firing one from inside a transition callback or a listener
    raises :class:`MachineError`.
    """

    def __init__(
        self,
        states: Sequence[str | Enum],
        initial_state: str | Enum,
        name: str = "machine",
    ) -> None:
        self.name = name
        self._states: Dict[str, State] = {}
        self._transitions: Dict[str, Dict[str, Transition]] = {}
        self._listeners: List[Listener] = []
        self._transitioning = False

        for state in states:
            self.add_state(state)
        if _key(initial_state) not in self._states:
            raise ValueError("Initial state must be in the provided list of states.")
        self._current_state = self._states[_key(initial_state)]

    @property
    def states(self) -> Dict[str, State]:
        return dict(self._states)

    @property
    def current_state(self) -> State:
        return self._current_state

    @property
    def is_transitioning(self) -> bool:
        return self._transitioning

    def is_state(self, name: str | Enum) -> bool:
        return self._current_state.name == _key(name)

    def add_state(self, state: str | Enum) -> State:
        if _key(state) in self._states:
            raise ValueError(f"State '{_key(state)}' already registered.")
        self._states[_key(state)] = State(state)
        return self._states[_key(state)]

    def get_state(self, name: str | Enum) -> State:
        key = _key(name)
        if key not in self._states:
            raise ValueError(f"State '{key}' not found in machine states.")
        return self._states[key]

    def add_listener(self, listener: Listener) -> None:
        """Register ``listener(old_state, new_state)``, called after every state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def add_transition(
        self,
        sources: str | Enum | Sequence[str | Enum],
        dest: str | Enum,
        trigger: str | Enum,
        *,
        before: Optional[Callback | Sequence[Callback]] = None,
        after: Optional[Callback | Sequence[Callback]] = None,
    ) -> None:
        if isinstance(sources, (list, tuple, set)):
            source_names = [_key(s) for s in sources]
        else:
            source_names = [_key(sources)]

        dest_name = _key(dest)
        if dest_name not in self._states:
            raise ValueError(f"Unknown destination state '{dest_name}'.")

        by_source = self._transitions.setdefault(_key(trigger), {})
        for src in source_names:
            if src not in self._states:
                raise ValueError(f"Unknown source state '{src}'.")
            if src in by_source:
                raise ValueError(f"Trigger '{_key(trigger)}' already leaves '{src}'.")
            by_source[src] = Transition(src, dest_name, before=before, after=after)

    def trigger(self, name: str | Enum) -> bool:
        """Fire a trigger; returns False when no transition applies from the current state."""
        key = _key(name)
        if self._transitioning:
            raise MachineError(
                f"{self.name}: trigger '{key}' fired while a transition is in progress"
            )

        transition = self._transitions.get(key, {}).get(self._current_state.name)
        if transition is None:
            return False

        self._transitioning = True
        try:
            transition.execute(self, key)
        finally:
            self._transitioning = False
        return True

    def to_graphviz(self) -> Digraph:
        g = Digraph(name=self.name)
        for state in self._states.values():
            shape = "doublecircle" if state is self._current_state else "circle"
            g.node(state.name, shape=shape)

        for trigger, by_source in self._transitions.items():
            for tr in by_source.values():
                g.edge(tr.source, tr.dest, label=trigger.lower())
        return g

    def _change_state(self, dest: State) -> None:
        previous = self._current_state
        self._current_state = dest

        logger.info(f"{self.name}: {previous.name} -> {dest.name}")
        for listener in list(self._listeners):
            try:
                listener(previous.value, dest.value)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")
