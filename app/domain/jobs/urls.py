from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

TRACKING_PARAMS = frozenset({"utm_source", "utm_medium", "utm_campaign", "ref", "refId", "trackingId"})


def normalize_job_url(url: str) -> str:
    """
    중복 판단용 정규 URL

    추적 파라미터를 제거하고 경로 끝의 슬래시를 없앤다.
    파싱할 수 없는 URL은 그대로 반환한다.
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url

    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in TRACKING_PARAMS
    ]
    path = parts.path.rstrip("/") or "/"

    return urlunsplit(
        (
            parts.scheme.lower(),
            parts.netloc.lower(),
            path,
            urlencode(query),
            parts.fragment,
        )
    )
