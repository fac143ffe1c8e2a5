from fastapi import Request

from core.exceptions import ValidationError
from db.repositories.base import MAX_POST_ID


def parse_post_id(raw: str) -> int:
    """Parse a path segment into a post id in 1..MAX_POST_ID or raise ValidationError."""
    value = raw.strip()
    # Length check first: int() refuses digit strings past the interpreter's conversion limit
    if not value.isascii() or not value.isdigit() or len(value) > len(str(MAX_POST_ID)):
        raise ValidationError("Invalid post ID")
    post_id = int(value)
    if not 0 < post_id <= MAX_POST_ID:
        raise ValidationError("Invalid post ID")
    return post_id


def extract_client(request: Request) -> str | None:
    """
    Extract the client IP from request.
    Priority:
      1) X-Forwarded-For (first IP)
      2) X-Real-IP
      3) CF-Connecting-IP
      4) request.client.host
    """
    xff = request.headers.get("x-forwarded-for")
    ip: str | None = None
    if xff:
        parts = [p.strip() for p in xff.split(",") if p.strip()]
        if parts:
            ip = parts[0]
    if not ip:
        ip = request.headers.get("x-real-ip") or request.headers.get("cf-connecting-ip")
    if not ip and request.client:
        ip = request.client.host
    return ip
