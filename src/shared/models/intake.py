"""Intake service Pydantic v2 data models."""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field, model_validator

_ISO_DATE_OR_EMPTY = r"^(\d{4}-\d{2}-\d{2})?$"


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""
    PLANNING = "Planning"
    ACTIVE = "Active"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    ON_HOLD = "On Hold"


class Priority(str, Enum):
    """Project priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ProjectType(str, Enum):
    """Kind of engagement."""
    CONSULTING = "consulting"
    DEVELOPMENT = "development"
    DESIGN = "design"
    ANALYSIS = "analysis"
    STRATEGY = "strategy"
    RESEARCH = "research"
    OTHER = "other"


class BudgetType(str, Enum):
    """How the budget is billed."""
    FIXED = "Fixed"
    HOURLY = "Hourly"
    RETAINER = "Retainer"
    MILESTONE = "Milestone"


class Currency(str, Enum):
    """Supported budget currencies."""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CHF = "CHF"
    CAD = "CAD"
    AUD = "AUD"


class DeliverableType(str, Enum):
    """Kind of deliverable."""
    REPORT = "Report"
    DASHBOARD = "Dashboard"
    API = "API"
    PRESENTATION = "Presentation"
    BRIEF = "Brief"
    ANALYSIS = "Analysis"
    STORYLINE = "Storyline"
    DOCUMENTATION = "Documentation"
    OTHER = "Other"


class DeliverableStatus(str, Enum):
    """Progress of a single deliverable."""
    PLANNED = "Planned"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    PENDING_REVIEW = "Pending Review"


class DeliverableFormat(str, Enum):
    """Output file format of a deliverable."""
    PDF = "pdf"
    DOCX = "docx"
    PPTX = "pptx"
    JSON = "json"
    MARKDOWN = "markdown"
    HTML = "html"
    OTHER = "other"


class DeliverableMetadata(BaseModel):
    """Format and ownership details of a deliverable."""
    format: DeliverableFormat = DeliverableFormat.OTHER
    assigned_to: str = ""
    expected_output: str = ""

    model_config = {"from_attributes": True}


class Deliverable(BaseModel):
    """A single deliverable within an intake record."""
    id: str = Field(..., pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    title: str
    type: DeliverableType = DeliverableType.OTHER
    description: str = ""
    status: DeliverableStatus = DeliverableStatus.PLANNED
    due_date: str = Field(default="", pattern=_ISO_DATE_OR_EMPTY)
    quality_score: float = Field(default=0, ge=0)
    dependencies: list[str] = Field(default_factory=list)
    metadata: DeliverableMetadata = Field(default_factory=DeliverableMetadata)

    model_config = {"from_attributes": True}


class ProjectIntakeRecord(BaseModel):
    """Normalized project record produced by the intake parser."""
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    start_date: str = Field(default="", pattern=_ISO_DATE_OR_EMPTY)
    end_date: str = Field(default="", pattern=_ISO_DATE_OR_EMPTY)
    status: ProjectStatus = ProjectStatus.PLANNING
    budget_amount: float = Field(default=0, ge=0)
    currency: Currency = Currency.USD
    budget_type: BudgetType = BudgetType.FIXED
    client_owner: str = ""
    internal_owner: str = ""
    priority: Priority = Priority.MEDIUM
    project_type: ProjectType = ProjectType.OTHER
    tags: list[str] = Field(default_factory=list)
    deliverables: list[Deliverable] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def budget_currency(self) -> Currency:
        """Alias of ``currency`` kept for older consumers."""
        return self.currency

    @model_validator(mode="after")
    def _check_deliverable_graph(self) -> "ProjectIntakeRecord":
        ids = [d.id for d in self.deliverables]
        if len(set(ids)) != len(ids):
            raise ValueError("Deliverable ids must be unique")
        known = set(ids)
        for deliverable in self.deliverables:
            for dep in deliverable.dependencies:
                if dep == deliverable.id:
                    raise ValueError(
                        f"Deliverable '{deliverable.id}' depends on itself"
                    )
                if dep not in known:
                    raise ValueError(
                        f"Deliverable '{deliverable.id}' depends on unknown '{dep}'"
                    )
        return self


class IntakeParseRequest(BaseModel):
    """Request to normalize a free-form project description."""
    raw_text: str = ""
    existing: dict[str, Any] = Field(default_factory=dict)

    model_config = {"from_attributes": True}
