# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models: pure data structures, NO FastAPI dependency.
"""

from pydantic import BaseModel, ConfigDict, Field


class RosterEntry(BaseModel):
    """A registered remote roster and the local group its members receive."""
    model_config = ConfigDict(frozen=True)

    roster_id: str = Field(..., min_length=1, description="Steam group id or vanity name")
    fetch_url: str = Field(..., min_length=1, description="Member list URL without page")
    target_group: str = Field(..., min_length=1, description="Local permission group")


class MemberRecord(BaseModel):
    """A discovered member waiting to be applied."""
    model_config = ConfigDict(frozen=True)

    member_id: str
    roster_id: str


class PageResult(BaseModel):
    """Everything extracted from one member list page."""
    member_ids: list[str] = Field(default_factory=list)
    current_page: int = 0
    total_pages: int = 0

    @property
    def has_next(self) -> bool:
        return (
            self.current_page != 0
            and self.total_pages != 0
            and self.current_page < self.total_pages
        )
