from slowapi import Limiter
from slowapi.util import get_remote_address

# IP 기준 남용 방지용. 사용자별 월간 한도는 quota ledger가 담당
LLM_RATE_LIMIT = "20/minute"

limiter = Limiter(key_func=get_remote_address, default_limits=["120/minute"])
