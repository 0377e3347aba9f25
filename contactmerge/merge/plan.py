"""
Merge planning for duplicate groups.

A merge plan is a conflict-free proposal for combining a duplicate group
into one record: which member supplies the name, the organization and the
photo, and the union of every phone number and email address.
"""

from dataclasses import dataclass, replace
from typing import List, Dict, Optional, Tuple, Iterable

from ..core.record import Record
from ..matching.matcher import DuplicateGroup

_UNCHANGED = object()


@dataclass(frozen=True, slots=True)
class MergeValueOption:
    """One distinct phone or email value and the records that carry it."""
    value: str
    owners: Tuple[str, ...]

    @property
    def display_value(self) -> str:
        return self.value if self.value else "Missing value"


@dataclass(frozen=True)
class MergePlan:
    """Proposal for merging one duplicate group.

    Attributes:
        group: The duplicate group being merged
        preferred_name_id: Member supplying the name
        preferred_organization_id: Member supplying the organization, if any has one
        preferred_photo_id: Member supplying the photo, if any has one
        phone_options: Every distinct phone number with its owners
        email_options: Every distinct email address with its owners
    """
    group: DuplicateGroup
    preferred_name_id: str
    preferred_organization_id: Optional[str]
    preferred_photo_id: Optional[str]
    phone_options: Tuple[MergeValueOption, ...]
    email_options: Tuple[MergeValueOption, ...]

    def __post_init__(self):
        object.__setattr__(self, 'phone_options', tuple(self.phone_options))
        object.__setattr__(self, 'email_options', tuple(self.email_options))
        errors = self.validate()
        if errors:
            raise ValueError('; '.join(errors))

    def __str__(self) -> str:
        """Human-readable plan summary."""
        return (
            f"Merge plan for {len(self.group)} records\n"
            f"  Name from: {self.preferred_name_id}\n"
            f"  Organization from: {self.preferred_organization_id or '-'}\n"
            f"  Photo from: {self.preferred_photo_id or '-'}\n"
            f"  Phones: {', '.join(self.selected_phone_numbers) or '-'}\n"
            f"  Emails: {', '.join(self.selected_email_addresses) or '-'}"
        )

    @property
    def member_ids(self) -> List[str]:
        return self.group.record_ids

    @property
    def selected_phone_numbers(self) -> Tuple[str, ...]:
        return tuple(option.value for option in self.phone_options)

    @property
    def selected_email_addresses(self) -> Tuple[str, ...]:
        return tuple(option.value for option in self.email_options)

    def validate(self) -> List[str]:
        """
        Check that the plan is consistent with its group.

        Returns:
            List of error messages (empty when the plan is valid)
        """
        errors = []
        members = {record.id: record for record in self.group.records}

        if self.preferred_name_id not in members:
            errors.append(f"Name source {self.preferred_name_id!r} is not in the group")

        if (self.preferred_organization_id is not None and
                self.preferred_organization_id not in members):
            errors.append(f"Organization source {self.preferred_organization_id!r} is not in the group")

        if self.preferred_photo_id is not None:
            photo_source = members.get(self.preferred_photo_id)
            if photo_source is None:
                errors.append(f"Photo source {self.preferred_photo_id!r} is not in the group")
            elif not photo_source.has_image:
                errors.append(f"Photo source {self.preferred_photo_id!r} has no image")

        for label, options, attribute in (
            ('phone', self.phone_options, 'phone_numbers'),
            ('email', self.email_options, 'email_addresses'),
        ):
            for option in options:
                if not option.owners:
                    errors.append(f"{label} {option.value!r} has no owner")
                for owner in option.owners:
                    record = members.get(owner)
                    if record is None or option.value not in getattr(record, attribute):
                        errors.append(f"{label} {option.value!r} does not belong to {owner!r}")

            planned = {option.value for option in options}
            for record in self.group.records:
                for value in getattr(record, attribute):
                    if value not in planned:
                        errors.append(f"{label} {value!r} from {record.id!r} would be dropped")

        return errors

    def choose(
        self,
        name_id=_UNCHANGED,
        organization_id=_UNCHANGED,
        photo_id=_UNCHANGED,
    ) -> 'MergePlan':
        """
        Return a copy of this plan with different source records.

        Args:
            name_id: Member to take the name from
            organization_id: Member to take the organization from, or None
            photo_id: Member to take the photo from, or None

        Raises:
            ValueError: If a chosen id is not a valid source
        """
        changes = {}
        if name_id is not _UNCHANGED:
            changes['preferred_name_id'] = name_id
        if organization_id is not _UNCHANGED:
            changes['preferred_organization_id'] = organization_id
        if photo_id is not _UNCHANGED:
            changes['preferred_photo_id'] = photo_id
        return replace(self, **changes)

    def merged_record(self, destination_id: Optional[str] = None) -> Record:
        """
        Compute the record that results from applying this plan.

        Args:
            destination_id: Member whose id survives the merge
                (defaults to the preferred name source)

        Returns:
            The merged Record value
        """
        members = {record.id: record for record in self.group.records}
        destination_id = destination_id or self.preferred_name_id
        if destination_id not in members:
            raise ValueError(f"Destination {destination_id!r} is not in the group")

        destination = members[destination_id]
        name_source = members[self.preferred_name_id]

        organization = None
        if self.preferred_organization_id is not None:
            organization = members[self.preferred_organization_id].organization

        created = [r.created_at for r in self.group.records if r.created_at is not None]

        return destination.with_changes(
            full_name=name_source.full_name,
            organization=organization,
            phone_numbers=self.selected_phone_numbers,
            email_addresses=self.selected_email_addresses,
            has_image=self.preferred_photo_id is not None or destination.has_image,
            created_at=min(created) if created else destination.created_at,
        )


class MergePlanBuilder:
    """
    Builds merge plans from duplicate groups.

    Selection rules:
    1. Name - the most complete record (phones + emails + organization),
       ties going to the earliest member
    2. Organization - the name source if it has one, else the first member that does
    3. Photo - the first member with an image
    4. Phones / emails - union of all members, first-seen order
    """

    def build_plan(self, group: DuplicateGroup) -> MergePlan:
        """
        Build the initial merge plan for a group.

        Args:
            group: Duplicate group to merge

        Returns:
            MergePlan; the group's records are not modified
        """
        primary = group.primary_record

        if primary.organization:
            organization_source = primary
        else:
            organization_source = next((r for r in group.records if r.organization), None)

        photo_source = next((r for r in group.records if r.has_image), None)

        return MergePlan(
            group=group,
            preferred_name_id=primary.id,
            preferred_organization_id=organization_source.id if organization_source else None,
            preferred_photo_id=photo_source.id if photo_source else None,
            phone_options=self.unique_values(group.records, 'phone_numbers'),
            email_options=self.unique_values(group.records, 'email_addresses'),
        )

    @staticmethod
    def unique_values(records: Iterable[Record], attribute: str) -> Tuple[MergeValueOption, ...]:
        """
        Collapse a multi-valued attribute into distinct values with owners.

        Values are compared as exact strings. A record appears at most once
        among the owners of a value even if it lists the value twice.
        """
        owners: Dict[str, List[str]] = {}
        for record in records:
            for value in getattr(record, attribute):
                value_owners = owners.setdefault(value, [])
                if record.id not in value_owners:
                    value_owners.append(record.id)

        return tuple(MergeValueOption(value=value, owners=tuple(ids)) for value, ids in owners.items())


def build_plan(group: DuplicateGroup) -> MergePlan:
    """Build the initial merge plan for a group."""
    return MergePlanBuilder().build_plan(group)
