"""Pydantic models for request and response bodies.

These models express the structure expected by the HTTP API.  The compile
route keeps its fields optional so that missing values are answered with
the route's own 400 body instead of a validation error.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ExecuteRequest(BaseModel):
    """Request body for running a snippet through the dispatcher."""

    language: str = Field(..., description="One of 'javascript', 'python', 'cpp' or an alias.")
    code: str = Field(..., description="Source code to execute.")


class ExecuteResponse(BaseModel):
    """Response body for a dispatcher run."""

    success: Optional[bool] = Field(
        default=None,
        description="Run verdict; null when the snippet was empty.",
    )
    output: str


class CompileRequest(BaseModel):
    """Request body of the remote compile route."""

    code: Optional[str] = Field(default=None, description="Source code to compile and run.")
    language: Optional[str] = Field(default=None, description="Language name or alias.")
    input: str = Field(default="", description="Standard input for the program.")
