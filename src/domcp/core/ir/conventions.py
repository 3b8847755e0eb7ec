"""
Project-wide descriptors for DOMCP IR.

Technology stack and coding conventions. The file structure pattern is what
the path resolver renders into concrete file paths.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class TechStack(BaseModel):
    """
    Technology stack constraints.

    Attributes:
        language: Implementation language (e.g. "python", "rust")
        framework: Main framework
        database: Primary database
        messaging: Messaging / event bus technology
        additional: Any other notable libraries or tools
    """

    language: str = ""
    framework: str = ""
    database: str = ""
    messaging: str = ""
    additional: list[str] = Field(default_factory=list)


class NamingConventions(BaseModel):
    """Free-text naming hints per artifact kind."""

    entities: str = ""
    value_objects: str = ""
    services: str = ""
    repositories: str = ""
    events: str = ""


class FileStructure(BaseModel):
    """
    File layout of the generated code.

    Attributes:
        pattern: Path template, may use {context}, {layer} and {type}
                 (e.g. "src/{context}/{layer}/{type}.py")
        layers: Ordered layer names (e.g. ["domain", "application"])
    """

    pattern: str = ""
    layers: list[str] = Field(default_factory=list)


class Conventions(BaseModel):
    """
    Coding conventions for the project.

    Attributes:
        naming: Naming hints per artifact kind
        file_structure: Path template and layers
        error_handling: Free-text error handling convention
        testing: Free-text testing convention
    """

    naming: NamingConventions = Field(default_factory=NamingConventions)
    file_structure: FileStructure = Field(default_factory=FileStructure)
    error_handling: str = ""
    testing: str = ""
