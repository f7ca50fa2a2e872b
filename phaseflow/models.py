"""Pydantic models for the phaseflow diagram engine."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class DatasetError(ValueError):
    """Input records violate the dataset contract."""


class UnknownProjectError(DatasetError):
    """A record (or lookup) references a project id that does not exist."""


# --- Input records ---


class Project(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    time: date
    size: float = Field(ge=0)
    color: str = Field(default="#3498db", pattern=r"^#[0-9a-fA-F]{6}$")


class Link(BaseModel):
    """A phased transition from one project to another."""
    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    strength: float = 0.0  # carried for future weighting, not used in geometry
    duration: int = Field(ge=0)  # months
    phases: int = Field(default=1, ge=1)

    @property
    def key(self) -> str:
        return f"{self.source}->{self.target}"


class StandalonePhase(BaseModel):
    """A phase progression anchored on a single project, with no target."""
    model_config = ConfigDict(frozen=True)

    source: str
    duration: int = Field(ge=0)  # months
    phases: int = Field(default=1, ge=1)

    @property
    def key(self) -> str:
        return f"{self.source}:standalone"


# --- Dataset ---


class FlowDataset(BaseModel):
    """Projects, links and standalone phases for one render pass.

    Cross-record references are checked on every construction, so a dataset
    that exists always lays out.
    """
    model_config = ConfigDict(frozen=True)

    projects: list[Project] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)
    standalone: list[StandalonePhase] = Field(default_factory=list)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            cause = _dataset_error(exc)
            if cause is None:
                raise
            raise cause from None

    @model_validator(mode="after")
    def _references_resolve(self) -> "FlowDataset":
        self.check_references()
        return self

    @classmethod
    def from_records(
        cls,
        projects: list[dict[str, Any]],
        links: list[dict[str, Any]] | None = None,
        standalone: list[dict[str, Any]] | None = None,
    ) -> "FlowDataset":
        """Build and validate a dataset from plain dict records.

        Raises pydantic.ValidationError for field contract violations and
        DatasetError for cross-record ones (unknown ids, duplicates, self-links).
        """
        return cls(
            projects=[Project(**r) for r in projects],
            links=[Link(**r) for r in links or []],
            standalone=[StandalonePhase(**r) for r in standalone or []],
        )

    def check_references(self) -> None:
        seen: set[str] = set()
        for p in self.projects:
            if p.id in seen:
                raise DatasetError(f"Duplicate project id: {p.id}")
            seen.add(p.id)

        for link in self.links:
            for ref in (link.source, link.target):
                if ref not in seen:
                    raise UnknownProjectError(f"Link {link.key} references unknown project '{ref}'")
            if link.source == link.target:
                raise DatasetError(f"Link {link.key} connects a project to itself")

        for phase in self.standalone:
            if phase.source not in seen:
                raise UnknownProjectError(
                    f"Standalone phase references unknown project '{phase.source}'"
                )

    def project(self, project_id: str) -> Project:
        for p in self.projects:
            if p.id == project_id:
                return p
        raise UnknownProjectError(f"Project not found: {project_id}")

    def project_index(self) -> dict[str, Project]:
        return {p.id: p for p in self.projects}


def _dataset_error(exc: ValidationError) -> DatasetError | None:
    """The DatasetError a model validator raised, if that is what failed."""
    for err in exc.errors():
        cause = err.get("ctx", {}).get("error")
        if isinstance(cause, DatasetError):
            return cause
    return None


# --- Derived output models ---


class ProjectInfo(BaseModel):
    """Details panel for a selected project."""
    id: str
    name: str
    size: float
    depends_on: list[str]
    influences: list[str]
    summary: str
