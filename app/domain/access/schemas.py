from pydantic import BaseModel, ConfigDict


class Identity(BaseModel):
    """Bearer 토큰 검증으로 확인된 사용자"""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str | None = None

    @property
    def normalized_email(self) -> str:
        return (self.email or "").strip().lower()
