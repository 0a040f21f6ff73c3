"""Structured article returned by the article writer and sent to the client."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

POINTS_PER_ARTICLE = 4


class ArticlePoint(BaseModel):
    """One section of an article. Its position in `Article.points` is its slot."""

    model_config = ConfigDict(populate_by_name=True)

    heading: str = Field(description="عنوان النقطة")
    content: str = Field(description="محتوى النقطة")
    image_prompt: str = Field(alias="imagePrompt", description="وصف الصورة بالإنجليزية لتوليدها")
    should_have_image: bool = Field(alias="shouldHaveImage", description="هل تحتاج هذه النقطة صورة")


class Article(BaseModel):
    """A titled article with exactly four points."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(description="عنوان المقال")
    introduction: str = Field(description="مقدمة المقال")
    points: List[ArticlePoint] = Field(
        min_length=POINTS_PER_ARTICLE,
        max_length=POINTS_PER_ARTICLE,
        description="نقاط المقال - يجب أن تكون 4 نقاط بالضبط",
    )
    conclusion: str = Field(description="خاتمة المقال")

    def to_payload(self) -> dict:
        """Return the wire representation using camelCase field names."""
        return self.model_dump(by_alias=True)
