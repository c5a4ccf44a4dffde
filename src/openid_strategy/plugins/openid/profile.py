"""Normalise provider attributes into a :class:`~openid_strategy.models.Profile`."""

from __future__ import annotations

from typing import Mapping

from openid_strategy.models import Profile, ProfileEmail, ProfileName


def parse_profile(attributes: Mapping[str, str]) -> Profile:
    """Build a profile from flattened SREG/AX attributes.

    ``fullname`` becomes the display name; when it is missing but both
    ``firstname`` and ``lastname`` are present, they are joined instead.
    """
    first = attributes.get("firstname")
    last = attributes.get("lastname")

    display_name = attributes.get("fullname")
    if not display_name and first and last:
        display_name = f"{first} {last}"

    emails = []
    if attributes.get("email"):
        emails.append(ProfileEmail(value=attributes["email"]))

    return Profile(
        display_name=display_name,
        name=ProfileName(family_name=last, given_name=first),
        emails=emails,
    )
