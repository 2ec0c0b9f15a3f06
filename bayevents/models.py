from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Event:
    """A single normalized listing. Built once by an adapter, never modified."""
    date: str
    source: str
    title: str
    time: Optional[str] = None
    venue: Optional[str] = None
    city: Optional[str] = None
    details: str = ""
    bands: Tuple[str, ...] = field(default_factory=tuple)
    link: Optional[str] = None
    category: Optional[str] = None
    source_id: Optional[str] = None

    @property
    def dedup_key(self):
        """Provider id when the source assigns one, otherwise (source, date, venue, title)."""
        if self.source_id:
            return ("id", self.source, self.source_id)
        return ("fields", self.source, self.date, self.venue, self.title)

    def to_dict(self):
        return {
            "date": self.date,
            "time": self.time,
            "source": self.source,
            "title": self.title,
            "venue": self.venue,
            "city": self.city,
            "details": self.details,
            "bands": list(self.bands),
            "link": self.link,
            "category": self.category,
        }
