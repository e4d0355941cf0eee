"""Status Model — tests for the help request state machine.

Tests cover:
    - Forward workflow edges are legal
    - Backward and skipping edges are illegal
    - Terminal states have no outgoing edges
    - cancelled is reachable from every non-terminal state
    - check_transition raises with the offending pair
"""

import itertools

import pytest

from mutual_aid.core.domain_types import HelpRequestStatus as S
from mutual_aid.core.errors import InvalidTransitionError
from mutual_aid.core.status_model import (
    INITIAL_STATUS,
    TERMINAL_STATUSES,
    allowed_transitions,
    can_transition,
    check_transition,
    is_terminal,
)

FORWARD = [S.PENDING, S.ACCEPTED, S.SHOPPING, S.DELIVERED, S.DONE]


def test_initial_status_is_pending():
    assert INITIAL_STATUS == S.PENDING


def test_terminal_statuses_are_done_and_cancelled():
    assert TERMINAL_STATUSES == {S.DONE, S.CANCELLED}
    assert is_terminal(S.DONE)
    assert is_terminal(S.CANCELLED)
    assert not is_terminal(S.PENDING)


@pytest.mark.parametrize("from_status,to_status", list(zip(FORWARD, FORWARD[1:])))
def test_each_forward_step_is_legal(from_status, to_status):
    assert can_transition(from_status, to_status)


@pytest.mark.parametrize("from_status", [S.PENDING, S.ACCEPTED, S.SHOPPING, S.DELIVERED])
def test_cancel_reachable_from_every_open_state(from_status):
    assert can_transition(from_status, S.CANCELLED)


@pytest.mark.parametrize("terminal", [S.DONE, S.CANCELLED])
def test_no_transition_leaves_a_terminal_state(terminal):
    for target in S:
        assert not can_transition(terminal, target)
        with pytest.raises(InvalidTransitionError):
            check_transition(terminal, target)


def test_backward_transitions_are_illegal():
    for earlier, later in itertools.combinations(FORWARD, 2):
        assert not can_transition(later, earlier)


def test_skipping_a_step_is_illegal():
    assert not can_transition(S.PENDING, S.DONE)
    assert not can_transition(S.PENDING, S.SHOPPING)
    assert not can_transition(S.ACCEPTED, S.DELIVERED)


def test_self_transition_is_not_an_edge():
    for status in S:
        assert not can_transition(status, status)


def test_allowed_transitions_in_workflow_order():
    assert allowed_transitions(S.PENDING) == [S.ACCEPTED, S.CANCELLED]
    assert allowed_transitions(S.DELIVERED) == [S.DONE, S.CANCELLED]
    assert allowed_transitions(S.DONE) == []


def test_check_transition_carries_pair_and_allowed_targets():
    with pytest.raises(InvalidTransitionError) as exc_info:
        check_transition(S.PENDING, S.DONE)
    err = exc_info.value
    assert err.from_status == "pending"
    assert err.to_status == "done"
    assert err.http_status == 400
    assert err.context.debug_info == {"allowed": ["accepted", "cancelled"]}


def test_check_transition_accepts_raw_string_values():
    check_transition("pending", "accepted")
