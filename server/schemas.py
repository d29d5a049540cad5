"""Tool argument schemas for the DocDesk MCP server."""

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from sources.loader import is_valid_source_url


class InvalidRequest(Exception):
    """Raised when a tool call is missing required arguments or has bad ones."""
    pass


class SearchDocsArgs(BaseModel):
    query: str = Field(description="Search query to find relevant documentation")
    category: Optional[str] = Field(default=None, description="Optional: Filter by category (API, Database, DevOps, etc.)")
    tags: Optional[List[str]] = Field(default=None, description="Optional: Filter by tags")
    limit: Optional[int] = Field(default=None, ge=1, le=100, description="Maximum number of results (default: 10)")


class GetDocArgs(BaseModel):
    id: str = Field(description="Document ID")


class AddDocArgs(BaseModel):
    id: str = Field(description="Unique document ID")
    title: str = Field(description="Document title")
    description: str = Field(description="Short description")
    content: str = Field(description="Full document content (supports Markdown)")
    category: str = Field(description="Category (e.g., API, Database, DevOps)")
    tags: List[str] = Field(description="Tags for categorization")
    version: Optional[str] = Field(default=None, description="Optional: Document version")


class DeleteDocArgs(BaseModel):
    id: str = Field(description="ID of the document to delete")


class FetchLibraryDocsArgs(BaseModel):
    library: str = Field(description='Name of the library/framework (e.g., "LangGraph", "React", "FastAPI")')
    query: Optional[str] = Field(
        default=None,
        description='Optional: Specific topic to search for in the documentation (e.g., "create agent", "routing")'
    )


class AddLibrarySourceArgs(BaseModel):
    library: str = Field(description="Name of the library/framework")
    url: str = Field(description="URL of the official documentation page")

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        if not is_valid_source_url(value):
            raise ValueError("url must be an absolute http(s) URL")
        return value


class NoArgs(BaseModel):
    pass


ArgsT = TypeVar("ArgsT", bound=BaseModel)


def parse_arguments(tool: str, model: Type[ArgsT], arguments: Optional[Dict[str, Any]]) -> ArgsT:
    """Validate raw tool arguments, turning pydantic errors into InvalidRequest."""
    if arguments is not None and not isinstance(arguments, dict):
        raise InvalidRequest(f"Arguments for {tool} must be an object")
    try:
        return model.model_validate(arguments or {})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidRequest(f"Invalid arguments for {tool}: {problems}") from e


def input_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """JSON schema advertised in tools/list."""
    schema = model.model_json_schema()
    schema.pop("title", None)
    schema.setdefault("properties", {})
    return schema
