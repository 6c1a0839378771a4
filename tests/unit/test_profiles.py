"""
test_profiles.py
----------------
Unit tests for anonverse.state.profiles.ProfileDirectory.
"""
import uuid

import pytest

from anonverse.errors import Forbidden, NotFound, ValidationError
from anonverse.models import Identity
from anonverse.state.profiles import ProfileDirectory


@pytest.fixture
def directory(data, device):
    return ProfileDirectory(data, device)


class TestFetchProfile:
    def test_found(self, directory, seed, run):
        ink = seed.profile("Ink")
        assert run(directory.fetch_profile(ink.id)).pen_name == "Ink"

    def test_missing(self, directory, run):
        with pytest.raises(NotFound):
            run(directory.fetch_profile(uuid.uuid4()))


class TestUpdateProfile:
    def test_trims_and_blank_bio_is_null(self, directory, seed, run):
        ink = seed.profile("Ink")
        updated = run(directory.update_profile(ink, "  Quill  ", "   "))
        assert updated.pen_name == "Quill"
        assert updated.bio is None
        assert updated.updated_at is not None

    def test_keeps_bio_text(self, directory, seed, run):
        ink = seed.profile("Ink")
        assert run(directory.update_profile(ink, "Ink", " Writes at night ")).bio == "Writes at night"

    def test_pen_name_required(self, directory, seed, data, run):
        ink = seed.profile("Ink")
        with pytest.raises(ValidationError):
            run(directory.update_profile(ink, " ", "bio"))
        assert data.writes() == []

    def test_unknown_profile(self, directory, run):
        with pytest.raises(NotFound):
            run(directory.update_profile(Identity(id=uuid.uuid4()), "Ghost", None))

    @pytest.mark.parametrize("device_fixture", ["guest_device", "device"])
    def test_guest_and_anonymous_cannot_edit(self, request, data, run, device_fixture):
        directory = ProfileDirectory(data, request.getfixturevalue(device_fixture))
        with pytest.raises(Forbidden):
            run(directory.update_profile(None, "Ghost", None))
        assert data.writes() == []
