"""Content documents, parsed files, and check results"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Optional

from pydantic import BaseModel

from mdfolio.core.utils.hashing import sha256


class Severity(str, Enum):
    """How a check result affects the overall outcome"""
    error = "error"
    warning = "warning"


class ContentDocument(BaseModel):
    """One front matter header plus the body that follows it."""
    path: str                       # relative to the site root, POSIX separators
    index: int = 0                  # > 0 for documents embedded later in the same file
    frontmatter: dict[str, Any] = {}
    header: Optional[str] = None    # raw header text, delimiters included; None when absent
    body: str
    offset: int = 0                 # file lines preceding the body

    @property
    def layout(self) -> Optional[str]:
        return self.frontmatter.get("layout")

    @property
    def title(self) -> Optional[str]:
        return self.frontmatter.get("title")

    @property
    def permalink(self) -> Optional[str]:
        """Explicit URL override from the header, if any."""
        return self.frontmatter.get("permalink")

    @property
    def date(self) -> Any:
        return self.frontmatter.get("date")

    @property
    def published(self) -> bool:
        return self.frontmatter.get("published", True) is not False

    @property
    def is_post(self) -> bool:
        return any(part in ("_posts", "_drafts") for part in PurePosixPath(self.path).parts[:-1])

    @property
    def is_draft(self) -> bool:
        return "_drafts" in PurePosixPath(self.path).parts[:-1]

    @property
    def header_lines(self) -> int:
        if not self.header:
            return 0
        return self.header.count("\n") + (0 if self.header.endswith("\n") else 1)


class CodeBlock(BaseModel):
    """A fenced code listing inside a document body."""
    language: str = ""
    line: int                       # 1-based file line of the opening fence
    lines: int                      # content lines between the fences
    closed: bool = True


class Issue(BaseModel):
    """A single check finding for a source file."""
    path: str
    code: str
    severity: Severity
    message: str
    line: Optional[int] = None

    def format(self) -> str:
        where = f"{self.path}:{self.line}" if self.line else self.path
        return f"{where}: {self.severity.value} {self.code}: {self.message}"


@dataclass
class ParsedFile:
    """Internal scan result for one source file; documents is empty when error is set."""
    path:      str
    raw:       str
    documents: list[ContentDocument] = field(default_factory=list)
    error:     Optional[str] = None
    error_line: Optional[int] = None

    @property
    def hash(self) -> str:
        return sha256(self.raw)

    @property
    def has_header(self) -> bool:
        return bool(self.documents) and self.documents[0].header is not None


@dataclass
class CheckReport:
    files:  list[ParsedFile]
    issues: list[Issue]
    fail_on_warnings: bool = False

    @property
    def documents(self) -> list[ContentDocument]:
        return [d for f in self.files for d in f.documents]

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.error]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.warning]

    @property
    def ok(self) -> bool:
        if self.fail_on_warnings:
            return not self.issues
        return not self.errors
