"""Contact record value types."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Tuple, Dict, Any


@dataclass(frozen=True, slots=True)
class NameComponents:
    """Given and family name of a contact, as stored by the record store."""
    given: str = ""
    family: str = ""

    @property
    def full_name(self) -> str:
        """Return 'given family' with empty parts left out."""
        return ' '.join(part for part in (self.given, self.family) if part)

    @classmethod
    def from_full_name(cls, full_name: str) -> 'NameComponents':
        """Split a display name into given name (first word) and family name (rest)."""
        parts = (full_name or '').split()
        if not parts:
            return cls()
        return cls(given=parts[0], family=' '.join(parts[1:]))


@dataclass(frozen=True, slots=True)
class Record:
    """An immutable contact record.

    Attributes:
        id: Opaque, stable identifier assigned by the record store
        full_name: Display name (may be empty or the "No Name" placeholder)
        organization: Organization name, None when absent
        phone_numbers: Phone numbers; order is kept but carries no meaning
        email_addresses: Email addresses
        has_image: True if the record has a profile photo
        created_at: Creation timestamp, if known
        modified_at: Last modification timestamp, if known
    """

    id: str
    full_name: str = ""
    organization: Optional[str] = None
    phone_numbers: Tuple[str, ...] = field(default_factory=tuple)
    email_addresses: Tuple[str, ...] = field(default_factory=tuple)
    has_image: bool = False
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Record id must not be empty")
        # Accept lists from callers but store tuples so the value stays hashable
        object.__setattr__(self, 'phone_numbers', tuple(self.phone_numbers or ()))
        object.__setattr__(self, 'email_addresses', tuple(self.email_addresses or ()))
        if self.organization is not None and not self.organization.strip():
            object.__setattr__(self, 'organization', None)

    def __str__(self) -> str:
        """Return a human-readable string representation."""
        name = self.full_name or "(no name)"
        if self.organization:
            return f"{name} [{self.organization}]"
        return name

    @property
    def completeness(self) -> int:
        """Completeness score used to pick the primary record of a group."""
        return (
            len(self.phone_numbers) +
            len(self.email_addresses) +
            (1 if self.organization else 0)
        )

    @property
    def has_phone(self) -> bool:
        return bool(self.phone_numbers)

    @property
    def has_email(self) -> bool:
        return bool(self.email_addresses)

    def with_changes(self, **changes) -> 'Record':
        """Return a copy of this record with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            'id': self.id,
            'full_name': self.full_name,
            'organization': self.organization,
            'phone_numbers': list(self.phone_numbers),
            'email_addresses': list(self.email_addresses),
            'has_image': self.has_image,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'modified_at': self.modified_at.isoformat() if self.modified_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Record':
        """Create from a dictionary produced by to_dict() or loaded from JSON."""
        created = data.get('created_at')
        modified = data.get('modified_at')
        return cls(
            id=str(data['id']),
            full_name=data.get('full_name') or '',
            organization=data.get('organization'),
            phone_numbers=tuple(data.get('phone_numbers') or ()),
            email_addresses=tuple(data.get('email_addresses') or ()),
            has_image=bool(data.get('has_image', False)),
            created_at=datetime.fromisoformat(created) if created else None,
            modified_at=datetime.fromisoformat(modified) if modified else None,
        )
