"""
One-shot notifications carried across a redirect in the session cookie.
"""
from typing import Dict, List

from fastapi import Request

FLASH_KEY = "_flashes"


def flash(request: Request, message: str, category: str = "success"):
    request.session.setdefault(FLASH_KEY, []).append({"category": category, "message": message})


def pop_flashes(request: Request) -> List[Dict[str, str]]:
    return request.session.pop(FLASH_KEY, [])
