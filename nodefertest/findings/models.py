# Pydantic data models for reported findings: Finding and Location.

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class Location(BaseModel):
    """Where in the source a finding was reported (file, line, column)."""

    path: Path
    line: int = Field(..., ge=1, description="1-based line number")
    column: int = Field(..., ge=1, description="1-based column number")
    snippet: Optional[str] = None

    model_config = {"arbitrary_types_allowed": True}


class Finding(BaseModel):
    """A single issue reported by a rule (e.g. a defer at line 42 of foo_test.go)."""

    rule_id: str
    message: str
    location: Location
    severity: str = Field(default="warning", description="e.g. error, warning, info")

    model_config = {"arbitrary_types_allowed": True}

    def format_line(self) -> str:
        """Render as `path:line:col: message`, the go vet diagnostic layout."""
        loc = self.location
        return f"{loc.path}:{loc.line}:{loc.column}: {self.message}"
