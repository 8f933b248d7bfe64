"""
AI 생성 채용공고를 external_jobs 행으로 변환

같은 (제목, 회사, 지역) 조합은 항상 같은 provider_job_id가 되도록 해시로 만든다.
"""

import hashlib
import re

from app.domain.jobs.schemas import GeneratedJobListing
from app.domain.jobs.urls import normalize_job_url

AI_SEARCH_PROVIDER = "ai_search"
DEFAULT_CURRENCY = "USD"
MIN_SALARY_VALUE = 1000

# 먼저 일치하는 통화 사용
CURRENCY_MARKERS: list[tuple[str, tuple[str, ...]]] = [
    ("AED", ("AED", "dirham")),
    ("SAR", ("SAR", "riyal")),
    ("QAR", ("QAR",)),
    ("KWD", ("KWD", "dinar")),
    ("BHD", ("BHD",)),
    ("OMR", ("OMR",)),
    ("EUR", ("€", "EUR")),
    ("GBP", ("£", "GBP")),
]

NUMBER_PATTERN = re.compile(r"\d[\d,]*")


def listing_id(title: str, company: str, location: str) -> str:
    digest = hashlib.sha1(f"{title}|{company}|{location}".lower().encode()).hexdigest()
    return f"ai_{digest[:16]}"


def detect_location_type(text: str) -> str | None:
    """근무 형태 문구에서 remote/hybrid/onsite 판별"""
    lower = text.lower()
    if any(word in lower for word in ("remote", "work from home", "wfh")):
        return "remote"
    if "hybrid" in lower:
        return "hybrid"
    if any(word in lower for word in ("onsite", "on-site", "in office")):
        return "onsite"
    return None


def parse_salary(text: str | None) -> tuple[int | None, int | None, str]:
    """
    급여 문구에서 (최소, 최대, 통화) 추출

    1000 미만 숫자는 급여로 보지 않는다. 값이 하나면 최대는 None.
    """
    if not text:
        return None, None, DEFAULT_CURRENCY

    currency = DEFAULT_CURRENCY
    for code, markers in CURRENCY_MARKERS:
        if any(marker in text for marker in markers):
            currency = code
            break

    values = [int(n.replace(",", "")) for n in NUMBER_PATTERN.findall(text)]
    values = [v for v in values if v >= MIN_SALARY_VALUE]
    if not values:
        return None, None, currency
    if len(values) == 1:
        return values[0], None, currency
    return min(values), max(values), currency


def listing_to_row(listing: GeneratedJobListing) -> dict:
    job_id = listing_id(listing.title, listing.company, listing.location)
    if listing.work_type:
        location_type = detect_location_type(listing.work_type)
    else:
        location_type = detect_location_type(f"{listing.title} {listing.location} {listing.description}")

    description = listing.description
    if listing.requirements:
        description = f"{description} Requirements: {listing.requirements}".strip()

    salary_min, salary_max, currency = parse_salary(listing.salary)
    url = listing.url.strip() if listing.url else None

    return {
        "provider": AI_SEARCH_PROVIDER,
        "provider_job_id": job_id,
        "title": listing.title,
        "company_name": listing.company,
        "location": listing.location,
        "location_type": location_type,
        "description_snippet": description or None,
        "salary_min": salary_min,
        "salary_max": salary_max,
        "salary_currency": currency,
        "apply_url": url,
        "canonical_url": normalize_job_url(url) if url else None,
        "raw": listing.model_dump(by_alias=True),
    }
