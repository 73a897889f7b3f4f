"""User document model — profile, permissions and translation history cache."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from wantok.models.base import DocumentBase


class Role(StrEnum):
    ADMIN = "admin"
    REVIEWER = "reviewer"
    TRANSLATOR = "translator"
    GUEST = "guest"


class Permission(StrEnum):
    ALL = "*"
    TRANSLATION_CREATE = "translation.create"
    TRANSLATION_EDIT = "translation.edit"
    TRANSLATION_REVIEW = "translation.review"
    TRANSLATION_APPROVE = "translation.approve"
    DATA_IMPORT = "data.import"


ROLE_BASE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.ADMIN: frozenset({Permission.ALL}),
    Role.REVIEWER: frozenset(
        {
            Permission.TRANSLATION_REVIEW,
            Permission.TRANSLATION_APPROVE,
            Permission.TRANSLATION_EDIT,
        }
    ),
    Role.TRANSLATOR: frozenset(
        {Permission.TRANSLATION_CREATE, Permission.TRANSLATION_EDIT}
    ),
    Role.GUEST: frozenset(),
}


class User(DocumentBase):
    """A platform member as seen by the queue and review workflow."""

    name: str
    email: str = ""
    role: Role = Role.TRANSLATOR
    is_active: bool = True
    permissions: list[str] = Field(default_factory=list)
    translated_sentence_ids: list[int] = Field(default_factory=list)

    @property
    def effective_permissions(self) -> set[str]:
        return {str(p) for p in ROLE_BASE_PERMISSIONS[self.role]} | set(self.permissions)

    def has_permission(self, permission: Permission | str) -> bool:
        if not self.is_active:
            return False
        granted = self.effective_permissions
        return Permission.ALL in granted or str(permission) in granted

    def has_translated(self, sentence_id: int) -> bool:
        return sentence_id in self.translated_sentence_ids

    @property
    def translation_total(self) -> int:
        return len(self.translated_sentence_ids)
