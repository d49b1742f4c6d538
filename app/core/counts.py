from typing import Any


def embedded_count(value: Any) -> int:
    """Read a PostgREST aggregate embed such as likes_count:post_likes(count)"""
    if isinstance(value, list):
        return (value[0] or {}).get("count", 0) if value else 0
    if isinstance(value, dict):
        return value.get("count", 0)
    if isinstance(value, int):
        return value
    return 0
