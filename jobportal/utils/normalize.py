# jobportal/utils/normalize.py
from datetime import datetime, timezone
from typing import Iterable, List, Optional


def utcnow() -> datetime:
    """Timezone-aware UTC "now", the form every timestamp is written in."""
    return datetime.now(timezone.utc)


def as_utc(v: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to aware UTC:
      - aware values are converted to UTC
      - naive values (e.g. read back from SQLite) are taken as UTC
    """
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


def clean_skills(skills: Optional[Iterable[str]]) -> List[str]:
    """Strip entries and drop the blank ones, keeping the order given."""
    if not skills:
        return []
    return [s.strip() for s in skills if s and s.strip()]


def unique_skills(skill_lists: Iterable[Iterable[str]]) -> List[str]:
    """Distinct skills across several lists, in first-seen order."""
    seen = set()
    out: List[str] = []
    for skills in skill_lists:
        for s in skills or []:
            if s not in seen:
                seen.add(s)
                out.append(s)
    return out


def norm_text(v: Optional[str]) -> str:
    return (v or "").strip().lower()
