"""Pydantic models describing the persisted catalog document."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, TypeAdapter

from fotogalerie.domain.model import CatalogEntry


class SnapshotRecord(BaseModel):
    """One array element of the snapshot file, using the published field names."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    source_url: str = Field(alias="sourceUrl", min_length=1)
    display_url: str = Field(alias="displayUrl")
    filename: str = ""
    source_message_id: str = Field(alias="sourceMessageId")
    source_message_url: str = Field(alias="sourceMessageUrl")
    byte_size: NonNegativeInt = Field(alias="byteSize")
    captured_at: int = Field(alias="capturedAt")
    captured_at_display: str = Field(alias="capturedAtDisplay")
    width: NonNegativeInt = 0
    height: NonNegativeInt = 0

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> SnapshotRecord:
        return cls(
            source_url=entry.source_url,
            display_url=entry.display_url,
            filename=entry.filename,
            source_message_id=entry.source_message_id,
            source_message_url=entry.source_message_url,
            byte_size=entry.byte_size,
            captured_at=entry.captured_at,
            captured_at_display=entry.captured_at_display,
            width=entry.width,
            height=entry.height,
        )

    def to_entry(self) -> CatalogEntry:
        return CatalogEntry(
            source_url=self.source_url,
            display_url=self.display_url,
            filename=self.filename,
            source_message_id=self.source_message_id,
            source_message_url=self.source_message_url,
            byte_size=self.byte_size,
            captured_at=self.captured_at,
            captured_at_display=self.captured_at_display,
            width=self.width,
            height=self.height,
        )


SnapshotDocument = TypeAdapter(list[SnapshotRecord])
