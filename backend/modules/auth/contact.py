"""Normalization for the contact points users sign in with."""

import re

_PHONE_SEPARATORS = re.compile(r"[\s\-().]")
MIN_PHONE_DIGITS = 10


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_phone(phone: str) -> str:
    """Strip whitespace, dashes, dots and parentheses; keep a leading '+'."""
    return _PHONE_SEPARATORS.sub("", phone)


def phone_digit_count(phone: str) -> int:
    return sum(ch.isdigit() for ch in phone)
