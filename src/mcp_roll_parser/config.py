from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ROLL_PARSER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    server_name: str = "mcp-roll-parser"
    log_level: str = "INFO"
    # stdio keeps stdout reserved for the MCP protocol; logs go to stderr.
    transport: Literal["stdio", "sse", "streamable-http"] = "stdio"


settings = Settings()
