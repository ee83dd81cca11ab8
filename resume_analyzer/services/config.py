from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings

from resume_analyzer.models.analysis import GenerationConfig


class Settings(BaseSettings):
    PORT: int = 5000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "*"

    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_TIMEOUT_SECONDS: float = 60.0

    GENERATION_TEMPERATURE: float = 1.0
    GENERATION_TOP_P: float = 0.95
    GENERATION_TOP_K: int = 40
    GENERATION_MAX_OUTPUT_TOKENS: int = 8192
    GENERATION_RESPONSE_MIME_TYPE: str = "text/plain"

    UPLOAD_DIR: str = "Uploads"
    ALLOW_EMPTY_RESUME: bool = False

    @field_validator("ALLOWED_ORIGINS")
    def parse_allowed_origins(cls, v: str) -> List[str]:
        return [origin.strip() for origin in v.split(",") if origin.strip()] if v else []

    def generation_config(self) -> GenerationConfig:
        return GenerationConfig(
            temperature=self.GENERATION_TEMPERATURE,
            top_p=self.GENERATION_TOP_P,
            top_k=self.GENERATION_TOP_K,
            max_output_tokens=self.GENERATION_MAX_OUTPUT_TOKENS,
            response_mime_type=self.GENERATION_RESPONSE_MIME_TYPE,
        )

    @property
    def model_timeout(self):
        return self.GEMINI_TIMEOUT_SECONDS if self.GEMINI_TIMEOUT_SECONDS > 0 else None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"
