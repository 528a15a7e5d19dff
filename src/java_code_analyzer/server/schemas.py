"""Request models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..analysis.models import AnalysisOptions


class AnalyzeOptionsModel(BaseModel):
    """Check categories toggled in the browser client."""

    security: bool = True
    performance: bool = True
    bugs: bool = True
    style: bool = True

    def to_options(self) -> AnalysisOptions:
        return AnalysisOptions(
            security=self.security,
            performance=self.performance,
            bugs=self.bugs,
            style=self.style,
        )


class AnalyzeRequest(BaseModel):
    """Body of POST /api/analyze and POST /api/analyze/demo.

    ``code`` is optional here so that empty submissions reach the validator
    and get the same 400 envelope as oversized ones.
    """

    code: str | None = Field(default=None, description="Java source to analyze")
    options: AnalyzeOptionsModel | None = None
    file_name: str | None = Field(default=None, alias="fileName", max_length=255)

    model_config = ConfigDict(populate_by_name=True)

    def analysis_options(self) -> AnalysisOptions:
        return self.options.to_options() if self.options else AnalysisOptions()
