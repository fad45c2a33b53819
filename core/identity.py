"""Human-readable identity strings derived from directory users."""

from auth.types import User

UNKNOWN_LABEL = "<unknown>"


def fq_tag(user: User) -> str:
    """Fully-qualified tag, e.g. `@alice:acme`."""
    return f"@{user.tag.slug}:{user.org.slug}"


def fq_name(user: User) -> str:
    """Non-empty name parts joined by a space."""
    parts = (user.first_name, user.middle_name, user.last_name)
    return " ".join(p.strip() for p in parts if p and p.strip())


def fq_label(user: User | None) -> str:
    """Tag plus full name, e.g. `@alice:acme (Alice Smith)`."""
    if user is None:
        return UNKNOWN_LABEL
    return f"{fq_tag(user)} ({fq_name(user)})"


def normalize_tag(tag_or_id: str | None) -> str:
    """Prefix `@` unless already present."""
    tag_or_id = tag_or_id or ""
    return tag_or_id if tag_or_id.startswith("@") else f"@{tag_or_id}"
