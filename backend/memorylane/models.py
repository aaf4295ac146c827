"""Pydantic models for the memory contract and its API.

Writes are validated here; the store keeps a flat superset row per memory.
Each memory ``type`` has its own input model so that, in strict mode, only
the fields relevant to that type can be set.
"""

from typing import Annotated, Any, Literal, Union, get_args
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Domains
# =============================================================================

MemoryType = Literal["event", "photo", "music", "video", "calendar", "thought"]
CalendarType = Literal["event", "reminder", "birthday", "anniversary"]
Mood = Literal["happy", "sad", "excited", "anxious", "peaceful", "frustrated", "grateful", "nostalgic"]
ThoughtCategory = Literal["reflection", "idea", "dream", "goal", "worry", "gratitude"]
Priority = Literal["low", "medium", "high"]
SuggestionType = Literal["anniversary", "gift", "event", "connection"]

MEMORY_TYPES: tuple[str, ...] = get_args(MemoryType)
MOODS: tuple[str, ...] = get_args(Mood)

# Type-specific columns, by the type they belong to
VARIANT_FIELDS: dict[str, tuple[str, ...]] = {
    "event": (),
    "photo": ("image_storage_id",),
    "music": ("music_url", "music_title", "music_artist"),
    "video": ("video_storage_id", "video_duration", "video_thumbnail_storage_id"),
    "calendar": ("calendar_date", "calendar_end_date", "calendar_type"),
    "thought": ("mood", "is_private", "thought_category"),
}
SUPERSET_FIELDS: tuple[str, ...] = tuple(f for fields in VARIANT_FIELDS.values() for f in fields)


class Location(BaseModel):
    """A place picked on the map."""
    lat: float
    lng: float
    name: str


# =============================================================================
# Memory Input Models
# =============================================================================

class MemoryFieldsBase(BaseModel):
    """Shared fields every memory carries."""
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    location: Location | None = None
    importance: int = Field(..., ge=1, le=10)


class EventFields(MemoryFieldsBase):
    type: Literal["event"]


class PhotoFields(MemoryFieldsBase):
    type: Literal["photo"]
    image_storage_id: str | None = None


class MusicFields(MemoryFieldsBase):
    type: Literal["music"]
    music_url: str | None = None
    music_title: str | None = None
    music_artist: str | None = None


class VideoFields(MemoryFieldsBase):
    type: Literal["video"]
    video_storage_id: str | None = None
    video_duration: float | None = None
    video_thumbnail_storage_id: str | None = None


class CalendarFields(MemoryFieldsBase):
    type: Literal["calendar"]
    calendar_date: int | None = None  # ms since epoch
    calendar_end_date: int | None = None
    calendar_type: CalendarType | None = None


class ThoughtFields(MemoryFieldsBase):
    type: Literal["thought"]
    mood: Mood | None = None
    is_private: bool | None = None
    thought_category: ThoughtCategory | None = None


MemoryFields = Annotated[
    Union[EventFields, PhotoFields, MusicFields, VideoFields, CalendarFields, ThoughtFields],
    Field(discriminator="type"),
]


class LenientMemoryFields(MemoryFieldsBase):
    """Flat superset: any type-specific field on any type."""
    type: MemoryType
    image_storage_id: str | None = None
    music_url: str | None = None
    music_title: str | None = None
    music_artist: str | None = None
    video_storage_id: str | None = None
    video_duration: float | None = None
    video_thumbnail_storage_id: str | None = None
    calendar_date: int | None = None
    calendar_end_date: int | None = None
    calendar_type: CalendarType | None = None
    mood: Mood | None = None
    is_private: bool | None = None
    thought_category: ThoughtCategory | None = None


# =============================================================================
# Memory Views
# =============================================================================

class MemoryView(BaseModel):
    """A stored memory as returned to its owner, media locations resolved.

    Stored values are not re-validated against the write constraints.
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    owner_id: str
    title: str
    content: str
    type: MemoryType
    date: int  # ms since epoch, server-assigned
    tags: list[str] = Field(default_factory=list)
    location: Location | None = None
    importance: int
    connections: list[str] = Field(default_factory=list)
    image_storage_id: str | None = None
    music_url: str | None = None
    music_title: str | None = None
    music_artist: str | None = None
    video_storage_id: str | None = None
    video_duration: float | None = None
    video_thumbnail_storage_id: str | None = None
    calendar_date: int | None = None
    calendar_end_date: int | None = None
    calendar_type: CalendarType | None = None
    mood: Mood | None = None
    is_private: bool | None = None
    thought_category: ThoughtCategory | None = None
    # Derived on read, never stored
    image_url: str | None = None
    video_url: str | None = None
    video_thumbnail_url: str | None = None


class MemoryCreated(BaseModel):
    """Id of a created or changed memory."""
    id: str


class MapNode(BaseModel):
    """A memory placed on the map plane."""
    memory: MemoryView
    x: float
    y: float
    radius: float


class MapEdge(BaseModel):
    """Link between two adjacent memories sharing at least one tag."""
    source_id: str
    target_id: str
    shared_tags: list[str]


class MemoryMap(BaseModel):
    """Map projection of an owner's memories."""
    nodes: list[MapNode] = Field(default_factory=list)
    connections: list[MapEdge] = Field(default_factory=list)


# =============================================================================
# Reminder Models
# =============================================================================

class ReminderCreate(BaseModel):
    """Request to create a reminder."""
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    due_date: int  # ms since epoch
    memory_id: UUID | None = None  # Weak reference, may dangle
    priority: Priority = "medium"
    ai_generated: bool = False


class ReminderUpdate(BaseModel):
    """Request to change a reminder's completion state."""
    completed: bool = True


class Reminder(BaseModel):
    """A stored reminder."""
    model_config = ConfigDict(extra="ignore")

    id: str
    owner_id: str
    memory_id: str | None = None
    title: str
    content: str
    due_date: int
    completed: bool = False
    priority: Priority = "medium"
    ai_generated: bool = False


# =============================================================================
# Suggestion Models
# =============================================================================

class Suggestion(BaseModel):
    """A stored AI suggestion. Produced elsewhere; listed and dismissed here."""
    model_config = ConfigDict(extra="ignore")

    id: str
    owner_id: str
    type: SuggestionType
    title: str
    content: str
    confidence: float  # 0-1, enforced by the producer
    related_memory_ids: list[str] = Field(default_factory=list)
    dismissed: bool = False
    action_taken: bool = False


def validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Reduce pydantic error dicts to JSON-safe loc/msg/type entries."""
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in errors
    ]
