"""Observer configuration models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


SupportedFormats = Literal["yaml", "json"]
FormatType = SupportedFormats | Literal["auto"]


class UpdateConfig(BaseModel):
    """Controls how an observer invokes its observables during an update."""

    check_signatures: bool = False
    """Bind every observable's signature against the context before invoking any.

    A mismatch raises InvocationError and leaves all result logs untouched.
    """

    ignore_extra_kwargs: bool = False
    """Drop named values an observable does not declare instead of passing them on."""

    model_config = ConfigDict(frozen=True, use_attribute_docstrings=True, extra="forbid")


class FileStorageConfig(BaseModel):
    """File storage configuration for observer results."""

    path: str
    """Path (or fsspec URL) of the results file."""

    format: FormatType = "auto"
    """Storage format. 'auto' picks the format from the file suffix."""

    encoding: str = "utf-8"
    """File encoding."""

    model_config = ConfigDict(frozen=True, use_attribute_docstrings=True, extra="forbid")
