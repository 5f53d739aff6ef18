from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
  model_config = SettingsConfigDict(env_file=".env", extra="ignore")

  database_url: str = "postgresql+asyncpg://boardhub:boardhub@db:5432/boardhub"
  app_version: str = "v2026-10-16"
  build_sha: str = "dev"
  api_docs_enabled: bool = True

  cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
  cors_origin_regex: str = r"^http://(localhost|127\.0\.0\.1):3000$"
  trusted_hosts: str = "localhost,127.0.0.1,0.0.0.0,api,web"

  # Set by the authenticating gateway in front of the API.
  identity_name_header: str = "X-User-Name"
  identity_role_header: str = "X-User-Role"

  admin_inbox: str = "ADMIN"
  unknown_board_name: str = "Unknown Board"
  default_board_columns: list[str] = ["To Do", "In Progress", "Done"]
  default_task_status: str = "To Do"
  default_task_priority: str = "Medium"

  log_level: str = "INFO"
  log_json: bool = False

  def cors_origin_list(self) -> list[str]:
    return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

  def trusted_host_list(self) -> list[str]:
    return [h.strip() for h in self.trusted_hosts.split(",") if h.strip()]


settings = Settings()
