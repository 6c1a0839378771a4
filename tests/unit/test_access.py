"""
test_access.py
--------------
Unit tests for anonverse.state.access: tier resolution and the capability gate.
"""
import uuid

import pytest

from anonverse.errors import Forbidden, PolicyError
from anonverse.models import Identity
from anonverse.state.access import (
    MUTATING_ACTIONS,
    READ_ACTIONS,
    AccessTier,
    Action,
    allowed,
    authorize,
    needs_entry,
    require,
    resolve_tier,
)


class TestResolveTier:
    """Test the two-input truth table."""

    @pytest.mark.parametrize(
        "session_present, guest_flag, expected",
        [
            (True, True, AccessTier.AUTHENTICATED),
            (True, False, AccessTier.AUTHENTICATED),
            (False, True, AccessTier.GUEST),
            (False, False, AccessTier.ANONYMOUS),
        ],
    )
    def test_truth_table(self, session_present, guest_flag, expected):
        assert resolve_tier(session_present, guest_flag) is expected


class TestAllowed:
    """Test the capability gate."""

    @pytest.mark.parametrize("action", list(Action))
    def test_authenticated_may_do_everything(self, action):
        assert allowed(AccessTier.AUTHENTICATED, action)

    @pytest.mark.parametrize("action", sorted(READ_ACTIONS))
    def test_guest_may_read(self, action):
        assert allowed(AccessTier.GUEST, action)

    @pytest.mark.parametrize("action", sorted(MUTATING_ACTIONS))
    def test_guest_may_not_mutate(self, action):
        assert not allowed(AccessTier.GUEST, action)

    @pytest.mark.parametrize("action", list(Action))
    def test_anonymous_may_do_nothing(self, action):
        assert not allowed(AccessTier.ANONYMOUS, action)

    def test_read_and_mutating_partition_actions(self):
        assert READ_ACTIONS | MUTATING_ACTIONS == set(Action)
        assert not READ_ACTIONS & MUTATING_ACTIONS


class TestRequire:
    def test_raises_forbidden_with_context(self):
        with pytest.raises(Forbidden) as info:
            require(AccessTier.GUEST, Action.LIKE)
        assert info.value.tier is AccessTier.GUEST
        assert info.value.action is Action.LIKE
        assert isinstance(info.value, PolicyError)

    def test_passes_when_allowed(self):
        require(AccessTier.GUEST, Action.VIEW_FEED)

    def test_needs_entry_only_for_anonymous(self):
        assert needs_entry(AccessTier.ANONYMOUS)
        assert not needs_entry(AccessTier.GUEST)
        assert not needs_entry(AccessTier.AUTHENTICATED)


class TestAuthorize:
    """Test gating from a viewer and the stored guest flag."""

    def test_viewer_wins_over_guest_flag(self, guest_device):
        authorize(Identity(id=uuid.uuid4()), guest_device, Action.LIKE)

    def test_guest_flag_allows_reads_only(self, guest_device):
        authorize(None, guest_device, Action.VIEW_COMMENTS)
        with pytest.raises(Forbidden):
            authorize(None, guest_device, Action.COMMENT)

    def test_flag_is_read_at_call_time(self, device):
        with pytest.raises(Forbidden):
            authorize(None, device, Action.VIEW_FEED)
        device.set_guest_flag()
        authorize(None, device, Action.VIEW_FEED)
