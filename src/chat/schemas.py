"""Pydantic schemas for chat requests."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.llm.prompts import GenerationOptions


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(min_length=1, max_length=4000)
    negative_prompt: str | None = Field(default=None, alias="negativePrompt", max_length=1000)
    min_words: int | None = Field(default=None, alias="minWords", ge=1, le=5000)
    max_words: int | None = Field(default=None, alias="maxWords", ge=1, le=5000)
    tone: str | None = Field(default=None, max_length=50)
    tool: str | None = Field(default=None, max_length=50)

    @model_validator(mode="after")
    def _word_range(self):
        if self.min_words and self.max_words and self.min_words > self.max_words:
            raise ValueError("minWords must not exceed maxWords")
        return self

    def options(self) -> GenerationOptions:
        return GenerationOptions(
            negative_prompt=self.negative_prompt,
            min_words=self.min_words,
            max_words=self.max_words,
            tone=self.tone,
            tool=self.tool,
        )


class FavoriteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_favorite: bool = Field(alias="isFavorite")
