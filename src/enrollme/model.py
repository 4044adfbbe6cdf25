from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
import json
from pathlib import Path
from typing import Optional

from loguru import logger
import yaml


class OutcomeKind(Enum):
    SUCCESS = "success"
    SECTION_NOT_FOUND = "section_not_found"
    NO_ENROLL_BUTTON = "no_enroll_button"
    BUTTON_DISABLED = "button_disabled"
    NO_CONFIRM_PERMISSION = "no_confirm_permission"


@dataclass(frozen=True)
class Outcome:
    """Result of a single attempt at one section."""

    kind: OutcomeKind
    section: str
    course: Optional[str] = None
    email_sent: bool = False

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    def describe(self) -> str:
        """Human readable message for this outcome, as shown to the user."""
        target = f"{self.course} ({self.section})" if self.course else self.section
        match self.kind:
            case OutcomeKind.SUCCESS:
                return f"Successfully added section ID {self.section} to your schedule!"
            case OutcomeKind.SECTION_NOT_FOUND:
                return f"Section ID {self.section} not found. Is the section ID valid?"
            case OutcomeKind.NO_ENROLL_BUTTON:
                return f"Unable to enroll in {target}. This class may have a wait-list system."
            case OutcomeKind.BUTTON_DISABLED:
                return (
                    f"Unable to enroll in {target}. You're either enrolled in this class "
                    "or your enrollment time has passed."
                )
            case OutcomeKind.NO_CONFIRM_PERMISSION:
                return (
                    f"Unable to enroll in {target}. Do you have permission to enroll in this course?"
                )
        raise ValueError(f"Unknown outcome kind: {self.kind}")

    def __repr__(self):
        parts = [f"[{self.kind.name}]", self.section]
        if self.course:
            parts.append(f"({self.course})")
        return " ".join(parts)


@dataclass
class EnrollmentSession:
    """Mutable state of one enrollment run.

    `enrolled` is kept insertion-ordered and unique. `dropped` holds sections
    removed from the working set by the not-found policy.
    """

    sections: list[str]
    cap: int
    enrolled: list[str] = field(default_factory=list)
    dropped: set[str] = field(default_factory=set)
    passes: int = 0

    def __post_init__(self):
        if self.cap < 1:
            raise ValueError(f"Enrollment cap must be positive, got {self.cap}.")
        self.sections = normalize_sections(self.sections)

    @property
    def cap_reached(self) -> bool:
        return len(self.enrolled) >= self.cap

    @property
    def pending(self) -> list[str]:
        """Sections still to be attempted, in request order."""
        return [s for s in self.sections if s not in self.enrolled and s not in self.dropped]

    @property
    def finished(self) -> bool:
        return self.cap_reached or not self.pending

    def record_success(self, section: str):
        if section in self.enrolled:
            return
        if self.cap_reached:
            raise ValueError(f"Cannot enroll in {section}: cap of {self.cap} already reached.")
        self.enrolled.append(section)


def normalize_sections(sections: Iterable[str]) -> list[str]:
    """Strips section IDs and removes empty entries and duplicates, keeping first-seen order."""
    seen: dict[str, None] = {}
    for section in sections:
        section = str(section).strip()
        if section:
            seen.setdefault(section, None)
    return list(seen)


def normalize_course_label(text: str) -> str:
    """Collapses whitespace runs, e.g. "CSE  110 " -> "CSE 110"."""
    return " ".join(text.split())


def load_sections() -> list[str]:
    yaml_path = Path("sections.yaml")
    json_path = Path("sections.json")

    data = None

    if yaml_path.exists():
        logger.info(f"Loading sections from {yaml_path}")
        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f)
    elif json_path.exists():
        logger.info(f"Loading sections from {json_path}")
        with open(json_path, "r") as f:
            data = json.load(f)
    else:
        logger.error("No sections configuration file found (sections.yaml or sections.json).")
        raise FileNotFoundError("sections.yaml or sections.json not found.")

    # Mapping format: {"sections": [...], ...}
    if isinstance(data, dict):
        data = data.get("sections") or []

    if not isinstance(data, list):
        logger.error(f"Unexpected sections format: {type(data).__name__}")
        return []

    # Section IDs are numeric, so YAML/JSON will usually parse them as ints
    sections = normalize_sections(str(item) for item in data if item is not None)
    logger.info(f"Loaded {len(sections)} sections.")
    return sections
