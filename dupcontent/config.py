"""Configuration management using Pydantic.

``EngineConfig`` is a plain model holding the thresholds for one analysis run;
``analyze`` builds it from fixed defaults and never looks at the environment.
``Config`` is the settings object used by the command line: it reads
``DUPCONTENT_``-prefixed environment variables and a ``.env`` file, with engine
fields nested under ``DUPCONTENT_ENGINE__`` (e.g.
``DUPCONTENT_ENGINE__SIMILAR_THRESHOLD``) and logging fields under
``DUPCONTENT_LOG_``.
"""
from typing import List
from pydantic import AliasChoices, BaseModel, Field, validator
from pydantic_settings import BaseSettings


_SETTINGS = {
    "env_prefix": "DUPCONTENT_",
    "env_file": ".env",
    "env_file_encoding": "utf-8",
    "case_sensitive": False,
    "extra": "ignore",
}


class EngineConfig(BaseModel):
    """Thresholds and limits for one analysis run.

    Fields also accept their camelCase names (``similarThreshold``,
    ``exactMinLength``, ...). Unknown keys are rejected.
    """
    exact_min_length: int = Field(50, ge=0, le=10000, validation_alias=AliasChoices("exact_min_length", "exactMinLength"), description="Min description length for exact/similar analysis")
    similar_threshold: float = Field(0.70, ge=0.0, le=1.0, validation_alias=AliasChoices("similar_threshold", "similarThreshold"), description="Token Jaccard above which two descriptions are near-duplicates")
    template_threshold: float = Field(0.80, ge=0.0, le=1.0, validation_alias=AliasChoices("template_threshold", "templateThreshold"), description="N-gram Jaccard above which a description matches a template sample")
    ngram_size: int = Field(3, ge=1, le=10, validation_alias=AliasChoices("ngram_size", "ngramSize"), description="Character n-gram width for template matching")
    max_products: int = Field(0, ge=0, le=100000, validation_alias=AliasChoices("max_products", "maxProducts"), description="Max products per analysis (0=unlimited)")
    async_max_workers: int = Field(4, ge=1, le=64, validation_alias=AliasChoices("async_max_workers", "asyncMaxWorkers"), description="Concurrent workers for async clustering")
    suggestion_threshold: float = Field(0.5, ge=0.0, le=1.0, validation_alias=AliasChoices("suggestion_threshold", "suggestionThreshold"), description="Token Jaccard above which a product is suggested as similar")
    suggestion_limit: int = Field(5, ge=1, le=100, validation_alias=AliasChoices("suggestion_limit", "suggestionLimit"), description="Max similar products returned per suggestion")

    model_config = {"extra": "forbid"}


class LoggingConfig(BaseSettings):
    """Logging configuration."""
    level: str = Field("INFO", description="Logging level")
    format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log format")
    max_context_length: int = Field(1000, ge=100, le=10000, description="Max length of logged JSON context")

    model_config = {**_SETTINGS, "env_prefix": "DUPCONTENT_LOG_"}

    @validator('level')
    def validate_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Invalid log level: {v}. Valid options: {valid_levels}')
        return v.upper()


class Config(BaseSettings):
    """Main configuration class combining all settings."""
    engine: EngineConfig = Field(default_factory=EngineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {**_SETTINGS, "env_nested_delimiter": "__"}

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any issues."""
        issues = []
        engine = self.engine

        if engine.similar_threshold < 0.5:
            issues.append("SIMILAR_THRESHOLD is very low, may group unrelated descriptions")
        if engine.template_threshold < 0.5:
            issues.append("TEMPLATE_THRESHOLD is very low, may flag unrelated descriptions as templates")
        if engine.exact_min_length < 10:
            issues.append("EXACT_MIN_LENGTH is very low, short descriptions carry little signal")
        if engine.max_products > 1000:
            issues.append("MAX_PRODUCTS is very high, clustering cost grows quadratically")

        return issues

    def log_configuration(self) -> None:
        """Log the current configuration."""
        from dupcontent.utils.logger import log_info

        log_info("Configuration loaded",
                exact_min_length=self.engine.exact_min_length,
                similar_threshold=self.engine.similar_threshold,
                template_threshold=self.engine.template_threshold,
                ngram_size=self.engine.ngram_size,
                max_products=self.engine.max_products,
                async_max_workers=self.engine.async_max_workers,
                log_level=self.logging.level)


# Global configuration instance (lazy loading)
_config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables."""
    global _config
    _config = Config()
    return _config
