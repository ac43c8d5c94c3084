"""Tests for owner and profile models."""

import pytest
from pydantic import ValidationError

from rootarchive.kernel.domain.owner import Owner, Profile

ADDRESS = "hyper://" + "cd" * 32 + "/"


class TestOwner:
    def test_accepts_field_names(self):
        owner = Owner(label="alice", address=ADDRESS, is_default=True)
        assert owner.is_default is True
        assert owner.is_temporary is False

    def test_accepts_record_aliases(self):
        owner = Owner.model_validate(
            {"label": "bob", "url": ADDRESS, "isDefault": False, "isTemporary": True}
        )
        assert owner.address == ADDRESS
        assert owner.is_temporary is True

    def test_dump_by_alias(self):
        dumped = Owner(label="alice", address=ADDRESS).model_dump(by_alias=True)
        assert dumped == {
            "label": "alice",
            "url": ADDRESS,
            "isDefault": False,
            "isTemporary": False,
        }

    def test_address_is_stripped(self):
        assert Owner(label="alice", address=f"  {ADDRESS} ").address == ADDRESS

    @pytest.mark.parametrize("label", ["", "   ", "a/b", ".", ".."])
    def test_label_must_be_one_segment(self, label):
        with pytest.raises(ValidationError):
            Owner(label=label, address=ADDRESS)

    def test_address_must_not_be_empty(self):
        with pytest.raises(ValidationError, match="address cannot be empty"):
            Owner(label="alice", address="  ")


def test_profile_defaults_to_no_address():
    profile = Profile(id=0)
    assert profile.address is None
