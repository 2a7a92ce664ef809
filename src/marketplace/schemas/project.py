"""Project input schemas."""

from pydantic import BaseModel, Field, field_validator, model_validator

from src.marketplace.models.enums import ProjectStatus, ProjectType


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    project_type: ProjectType = ProjectType.FIXED
    budget_min: float | None = Field(default=None, ge=0)
    budget_max: float | None = Field(default=None, ge=0)
    as_draft: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project title cannot be empty or whitespace only")
        return v

    @model_validator(mode="after")
    def validate_budget_range(self) -> "ProjectCreate":
        if (
            self.budget_min is not None
            and self.budget_max is not None
            and self.budget_min > self.budget_max
        ):
            raise ValueError("budget_min cannot exceed budget_max")
        return self


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Status is not patchable."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    project_type: ProjectType | None = None
    budget_min: float | None = Field(default=None, ge=0)
    budget_max: float | None = Field(default=None, ge=0)

    @field_validator("title", "description", "project_type")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null; omit it to leave it unchanged")
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Project title cannot be empty or whitespace only")
        return v


class ProjectFilters(BaseModel):
    """Browse filters for the public project listing."""

    status: ProjectStatus = ProjectStatus.OPEN
    project_type: ProjectType | None = None
    budget_min: float | None = Field(default=None, ge=0)
    budget_max: float | None = Field(default=None, ge=0)
    search: str | None = Field(default=None, max_length=200)
