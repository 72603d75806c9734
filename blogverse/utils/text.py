"""
Text Processing Utilities

This module provides the string helpers behind public identifiers:
1. random_suffix: short random strings for usernames, slugs and object keys
2. slugify_title: turn a post title into a URL-friendly slug
3. normalize_tags: lowercase and de-duplicate tags
"""

import re
import secrets
import string


# URL-safe alphabet, same characters as nanoid's default
URL_ALPHABET = string.ascii_letters + string.digits + "_-"

# Length of the random part appended to slugs
SLUG_SUFFIX_LENGTH = 21


def random_suffix(length: int) -> str:
    """
    Return `length` random URL-safe characters.

    Uses the `secrets` module so suffixes are not predictable.
    """
    return "".join(secrets.choice(URL_ALPHABET) for _ in range(length))


def slugify_title(title: str) -> str:
    """
    Build a practically-unique slug from a post title.

    Non-alphanumeric characters become spaces, whitespace runs collapse into
    single hyphens, and a random suffix is appended. Uniqueness comes from
    the suffix; existing slugs are not consulted.

    Example:
        >>> slugify_title("Hello, World!")
        'Hello-World-V1StGXR8_Z5jdHi6B-myT'
    """
    words = re.sub(r"[^a-zA-Z0-9]", " ", title).split()
    suffix = random_suffix(SLUG_SUFFIX_LENGTH)
    if not words:
        return suffix
    return "-".join(words) + "-" + suffix


def normalize_tags(tags: list[str]) -> list[str]:
    """
    Lowercase tags, dropping blanks and repeats while keeping order.

    Example:
        >>> normalize_tags(["Python", " go ", "python", ""])
        ['python', 'go']
    """
    seen = []
    for tag in tags:
        tag = tag.strip().lower()
        if tag and tag not in seen:
            seen.append(tag)
    return seen
