"""Unified data models for parsed API documentation.

Both dialect adapters convert their input into these standard models,
and the orchestrator returns them to callers. JSON field names are the
camelCase aliases; Python code uses the snake_case attribute names.
"""

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

RequestType = Literal["header", "query", "body", "form"]
Direction = Literal["request", "response"]


class ParserOptions(BaseModel):
    """Inclusion policy for example synthesis."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    include_read_only: bool = Field(True, alias="includeReadOnly")
    include_write_only: bool = Field(True, alias="includeWriteOnly")
    required_only: bool = Field(False, alias="requiredOnly")
    default_min_items: int = Field(1, alias="defaultMinItems", ge=0)


class DocInfo(BaseModel):
    """Document-level metadata taken from `info`."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    version: str | None = None
    description: str | None = None

    @field_validator("title", "version", "description", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # YAML happily turns `version: 1.0` into a float
        if value is None or isinstance(value, str):
            return value
        return str(value)


class Diagnostic(BaseModel):
    """A non-fatal problem recorded while parsing one item."""

    path: str | None = None
    method: str | None = None
    direction: Direction | None = None
    kind: str  # error class name
    message: str


class ExampleResult(BaseModel):
    """Adapter output for one path/method/direction."""

    model_config = ConfigDict(populate_by_name=True)

    data: Any = None
    req_type: RequestType | None = Field(None, alias="reqType")
    error: Diagnostic | None = None


class ApiRecord(BaseModel):
    """A single endpoint with its synthesized examples."""

    model_config = ConfigDict(populate_by_name=True)

    path: str
    method: str
    summary: str | None = None
    req_type: RequestType | None = Field(None, alias="reqType")
    req_example: Any = Field(None, alias="reqExample")
    res_example: Any = Field(None, alias="resExample")

    def to_json_dict(self) -> dict:
        """Dump by alias; request fields only when a request category matched.

        Example values are kept even when they are null.
        """
        exclude = {"req_type", "req_example"} if self.req_type is None else set()
        if self.summary is None:
            exclude.add("summary")
        return self.model_dump(by_alias=True, exclude=exclude)


class ParseResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_list: list[ApiRecord] = Field(default_factory=list, alias="apiList")
    api_info: DocInfo = Field(default_factory=DocInfo, alias="apiInfo")
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    def to_json_dict(self, include_diagnostics: bool = True) -> dict:
        """Dump with the camelCase field names, dropping absent metadata."""
        data = {
            "apiList": [record.to_json_dict() for record in self.api_list],
            "apiInfo": self.api_info.model_dump(exclude_none=True),
        }
        if include_diagnostics:
            data["diagnostics"] = [d.model_dump(exclude_none=True) for d in self.diagnostics]
        return data


class _Document(BaseModel):
    model_config = ConfigDict(extra="allow")

    info: DocInfo = Field(default_factory=DocInfo)
    paths: dict[str, Any] = Field(default_factory=dict)

    @field_validator("info", "paths", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        # `paths:` with nothing under it loads as None
        return {} if value is None else value


class Swagger2Document(_Document):
    """A Swagger 2.0 document; unknown top-level keys are kept."""

    registry_path: ClassVar[tuple[str, ...]] = ("definitions",)

    swagger: Literal["2.0"]
    definitions: dict[str, Any] = Field(default_factory=dict)


class OpenAPI3Document(_Document):
    """An OpenAPI 3.x document; unknown top-level keys are kept."""

    registry_path: ClassVar[tuple[str, ...]] = ("components", "schemas")

    openapi: str
    components: dict[str, Any] = Field(default_factory=dict)

    @field_validator("openapi")
    @classmethod
    def _must_be_v3(cls, value: str) -> str:
        if not value.startswith("3"):
            raise ValueError(f"openapi version {value!r} is not 3.x")
        return value


ApiDocument = Swagger2Document | OpenAPI3Document
