import logging
from typing import Dict, List, Optional, Set

from hdfs_wait.core.exceptions import InvalidTransitionError
from hdfs_wait.models import PollState


class PollStateMachine:
    """
    Gatekeeper for the state of one wait job.

    The only place allowed to change the job state. Every transition is
    validated against the table below and logged.
    """

    TERMINAL_STATES = {
        PollState.FRESH_FOUND,
        PollState.FORCED_FAILURE,
        PollState.SOFT_TIMEOUT,
    }

    def __init__(self, path: str, logger: Optional[logging.Logger] = None):
        self._path = path
        self._logger = logger or logging.getLogger(__name__)
        self._state = PollState.POLLING
        self._history: List[PollState] = [PollState.POLLING]

        self._transitions: Dict[PollState, Set[PollState]] = {
            PollState.POLLING: {
                PollState.FRESH_FOUND,
                PollState.TIMED_OUT,
            },
            PollState.TIMED_OUT: {
                PollState.FORCED_FAILURE,
                PollState.SOFT_TIMEOUT,
            },
            PollState.FRESH_FOUND: set(),
            PollState.FORCED_FAILURE: set(),
            PollState.SOFT_TIMEOUT: set(),
        }

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def history(self) -> List[PollState]:
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        return self._state in self.TERMINAL_STATES

    def transition(self, new_state: PollState) -> PollState:
        """
        Move to new_state.

        Raises:
            InvalidTransitionError: If the transition is not allowed.
        """
        old_state = self._state

        if new_state not in self._transitions.get(old_state, set()):
            raise InvalidTransitionError(self._path, old_state.value, new_state.value)

        self._logger.info(f"Transition: {self._path} | {old_state.value} -> {new_state.value}")
        self._state = new_state
        self._history.append(new_state)
        return new_state
