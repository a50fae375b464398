"""State machine for a ranking run."""

from enum import Enum

import structlog

from repo_spotlight.engine.constants import COMPONENT_ENGINE


logger = structlog.get_logger()


class RunState(str, Enum):
    """State of a ranking run.

    - RUN_PENDING: Not yet started
    - RUN_VALIDATED: Subject and configuration accepted
    - RUN_ENUMERATED: Repository listing fetched
    - RUN_FETCHING: Per-repository traffic requests in progress
    - RUN_RANKED: Result sorted and truncated (possibly empty)
    - RUN_FAILED: Aborted with an error
    """

    RUN_PENDING = "RUN_PENDING"
    RUN_VALIDATED = "RUN_VALIDATED"
    RUN_ENUMERATED = "RUN_ENUMERATED"
    RUN_FETCHING = "RUN_FETCHING"
    RUN_RANKED = "RUN_RANKED"
    RUN_FAILED = "RUN_FAILED"


# Valid state transitions
_VALID_TRANSITIONS: dict[RunState, set[RunState]] = {
    RunState.RUN_PENDING: {RunState.RUN_VALIDATED, RunState.RUN_FAILED},
    RunState.RUN_VALIDATED: {RunState.RUN_ENUMERATED, RunState.RUN_FAILED},
    RunState.RUN_ENUMERATED: {RunState.RUN_FETCHING, RunState.RUN_FAILED},
    RunState.RUN_FETCHING: {RunState.RUN_RANKED, RunState.RUN_FAILED},
    RunState.RUN_RANKED: set(),  # Terminal state
    RunState.RUN_FAILED: set(),  # Terminal state
}


class RunStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(self, from_state: RunState, to_state: RunState) -> None:
        """Initialize the transition error.

        Args:
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal run state transition: {from_state.value} -> {to_state.value}"
        )


class RunStateMachine:
    """Manages state transitions for one ranking run.

    Enforces valid transitions and logs all state changes.
    """

    def __init__(self, subject: str, run_id: str = "") -> None:
        """Initialize the state machine.

        Args:
            subject: Subject whose repositories are being ranked.
            run_id: Identifier for the current run.
        """
        self._state = RunState.RUN_PENDING
        self._log = logger.bind(
            component=COMPONENT_ENGINE,
            run_id=run_id,
            subject=subject,
        )

    @property
    def state(self) -> RunState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in (RunState.RUN_RANKED, RunState.RUN_FAILED)

    def can_transition_to(self, target: RunState) -> bool:
        """Check if a transition to the target state is valid.

        Args:
            target: The target state.

        Returns:
            True if the transition is valid.
        """
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: RunState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            RunStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise RunStateTransitionError(self._state, target)

        old_state = self._state
        self._state = target
        self._log.debug(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )

    def to_validated(self) -> None:
        """Transition to RUN_VALIDATED state."""
        self.transition_to(RunState.RUN_VALIDATED)

    def to_enumerated(self) -> None:
        """Transition to RUN_ENUMERATED state."""
        self.transition_to(RunState.RUN_ENUMERATED)

    def to_fetching(self) -> None:
        """Transition to RUN_FETCHING state."""
        self.transition_to(RunState.RUN_FETCHING)

    def to_ranked(self) -> None:
        """Transition to RUN_RANKED state."""
        self.transition_to(RunState.RUN_RANKED)

    def to_failed(self) -> None:
        """Transition to RUN_FAILED state, unless already terminal."""
        if not self.is_terminal:
            self.transition_to(RunState.RUN_FAILED)
