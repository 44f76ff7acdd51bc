# trigeval/config/models.py

"""
Pydantic models for defining the structure and validation of the trigeval configuration (trigeval.toml).
Uses Pydantic V2 syntax.
"""

from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# --- Helper Functions ---

def _resolve_path(path: Union[str, Path]) -> Path:
    """Resolves and expands user paths."""
    return Path(path).expanduser().resolve()

# --- Model Definitions ---

class EngineConfig(BaseModel):
    """Limits and tuning knobs of the expression engine."""
    max_cache_size: int = Field(1000, gt=0, description="Capacity of each of the two expression caches.")
    max_expression_length: int = Field(2000, gt=0, description="Longest accepted expression, in characters.")
    max_nesting_depth: int = Field(20, gt=0, description="Deepest accepted parenthesis nesting.")
    evaluation_timeout_ms: float = Field(100.0, gt=0, description="Advisory threshold; slower calls are logged, never aborted.")
    eviction_fraction: float = Field(0.3, gt=0, le=1.0, description="Share of the compiled cache dropped on overflow.")
    latency_smoothing: float = Field(0.1, gt=0, le=1.0, description="EMA smoothing factor for latency statistics.")
    complexity_warning: int = Field(100, ge=0, description="Complexity score above which a performance warning is added.")
    complexity_critical: int = Field(500, ge=0, description="Complexity score above which a stronger warning is added.")
    idle_window_s: float = Field(10.0, gt=0, description="Calls-per-second reads 0 after this much idle time.")
    memory_per_entry_bytes: int = Field(1024, gt=0, description="Crude per-entry size used by the cache memory estimate.")

    @model_validator(mode='after')
    def check_complexity_thresholds(self) -> "EngineConfig":
        """The critical threshold may not sit below the warning threshold."""
        if self.complexity_critical < self.complexity_warning:
            raise ValueError("complexity_critical must be >= complexity_warning")
        return self

class SamplingConfig(BaseModel):
    """Defaults for curve sampling."""
    default_steps: int = Field(2000, gt=0, description="Number of steps when none is given.")
    max_steps: int = Field(8000, gt=0, description="Hard ceiling on the number of steps per curve.")
    turns: float = Field(4.0, gt=0, description="Curve parameter span in full turns (t runs over [0, 2*pi*turns]).")

class PathsConfig(BaseModel):
    """Configuration for file paths used by trigeval."""
    output_dir: Path = Field(default=Path("./trigeval_output"), description="Default directory for saving results.")
    log_directory: Path = Field(default=Path("./trigeval_logs"), description="Directory for log files.")

    @field_validator('output_dir', 'log_directory', mode='before')
    @classmethod
    def resolve_paths_before_validation(cls, value: Any) -> Path:
        """Resolves paths before Pydantic validates them."""
        if isinstance(value, (str, Path)):
            return _resolve_path(value)
        return value

class LoggingConfig(BaseModel):
    """Logging configuration settings."""
    log_file_enabled: bool = Field(False, description="Enable/disable persistent file logging.")
    log_filename_template: str = Field("trigeval_run_{timestamp:%Y%m%d_%H%M%S}.log", description="Naming pattern for log files.")
    log_level_file: str = Field("DEBUG", description="Minimum level for file logs (DEBUG, INFO, WARNING, ERROR, CRITICAL).")
    log_format: str = Field("%(asctime)s [%(levelname)-8s] %(name)-30s - %(message)s (%(filename)s:%(lineno)d)", description="Format string for file log entries.")
    log_level_console: str = Field("WARNING", description="Default minimum level for console output (overridden by verbosity flags).")

    @field_validator('log_level_file', 'log_level_console')
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Validate log level strings."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed_levels:
            raise ValueError(f"Invalid log level '{value}'. Must be one of {allowed_levels}")
        return upper_value

class TrigevalConfig(BaseModel):
    """Root configuration model for trigeval."""
    model_config = ConfigDict(
        extra='ignore',
        validate_assignment=True
    )

    engine: EngineConfig = Field(default_factory=EngineConfig)
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
