"""Blueprint models.

A blueprint is the structural plan the model proposes for an ambitious
request. The user approves it before any file is generated. Field aliases
follow the JSON the model is instructed to emit.
"""

from enum import Enum

from pydantic import BaseModel, Field


class StyleCategory(str, Enum):
    """Fixed categories a style guideline can belong to."""

    COLOR = "Color"
    LAYOUT = "Layout"
    TYPOGRAPHY = "Typography"
    ICONOGRAPHY = "Iconography"
    ANIMATION = "Animation"


class Feature(BaseModel):
    """A planned feature of the application."""

    title: str
    description: str


class StyleGuideline(BaseModel):
    """A style decision. ``colors`` only means something for COLOR."""

    category: StyleCategory
    details: str
    colors: list[str] | None = None


class Blueprint(BaseModel):
    """A structural plan: name, ordered features, ordered style guidelines."""

    app_name: str = Field(alias="appName")
    features: list[Feature] = Field(default_factory=list)
    style_guidelines: list[StyleGuideline] = Field(
        default_factory=list, alias="styleGuidelines"
    )

    model_config = {"populate_by_name": True}

    def colors(self) -> list[str]:
        """All colors of the COLOR guidelines, in order."""
        return [
            color
            for guideline in self.style_guidelines
            if guideline.category == StyleCategory.COLOR
            for color in guideline.colors or []
        ]
