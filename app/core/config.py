from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정"""

    environment: str = "development"

    # Supabase 설정
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_timeout: float = 30.0

    # 이력서 스토리지 설정
    resume_bucket: str = "resumes"
    signed_url_ttl_seconds: int = 300
    max_pdf_bytes: int = 10 * 1024 * 1024
    min_extracted_chars: int = 100
    fetch_timeout: float = 30.0

    # LLM 프로바이더 선택: "openai" 또는 "anthropic"
    llm_provider: str = "openai"

    # OpenAI 설정
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_timeout: float = 60.0

    # Anthropic 설정 - 직무 추천용
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-sonnet-20241022"
    anthropic_timeout: float = 60.0

    # 월간 사용량 제한
    resume_analysis_monthly_limit: int = 2

    # 초대 설정
    invitation_ttl_days: int = 7
    invitation_token_secret: str = ""

    # 이메일(Resend) 설정
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"
    email_from: str = "Career Playbook <noreply@careerplaybook.app>"
    email_timeout: float = 10.0
    app_url: str = "https://careerplaybook.app"

    # 리마인더 스윕 인증
    cron_secret: str = ""
    reminder_batch_size: int = 50

    # 로깅 설정
    log_level: str = "INFO"

    # CORS 설정
    cors_allowed_origins: str = "*"

    # Langfuse 설정
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    def validate_for_production(self) -> list[str]:
        """프로덕션 환경에서 필수 설정 검증 후 누락된 항목 반환"""
        errors = []
        if not self.supabase_url:
            errors.append("SUPABASE_URL")
        if not self.supabase_service_role_key:
            errors.append("SUPABASE_SERVICE_ROLE_KEY")
        if not self.openai_api_key and not self.anthropic_api_key:
            errors.append("OPENAI_API_KEY")
        if not self.invitation_token_secret:
            errors.append("INVITATION_TOKEN_SECRET")
        if not self.cron_secret:
            errors.append("CRON_SECRET")
        return errors


settings = Settings()
