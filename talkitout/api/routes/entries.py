"""
Journal entry REST endpoints.

Lists audio and text entries in insertion order, creates and edits text
entries, resolves text bodies, and scores an entry's sentiment.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from talkitout.api.dependencies import AppServices, get_services
from talkitout.core.models import (
    AudioEntry,
    JournalEntry,
    SentimentResponse,
    TextContentResponse,
    TextEntry,
    TextEntryCreate,
    TextEntryUpdate,
)
from talkitout.services.classification.sentiment import advice

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get("", response_model=list[JournalEntry])
async def list_entries(services: AppServices = Depends(get_services)):
    """All entries, oldest first."""
    return list(services.entries.all())


@router.get("/{entry_id}", response_model=JournalEntry)
async def get_entry(entry_id: UUID, services: AppServices = Depends(get_services)):
    return services.entries.get(entry_id)


@router.get("/{entry_id}/sentiment", response_model=SentimentResponse)
async def get_entry_sentiment(entry_id: UUID, services: AppServices = Depends(get_services)):
    """Score the transcript (audio) or resolved body (text) of an entry."""
    entry = services.entries.get(entry_id)
    if isinstance(entry, AudioEntry):
        text = entry.transcript
    else:
        text = await services.text_journal.load(entry.id)

    sentiment = await services.sentiment.analyze(text)
    return SentimentResponse(entry_id=entry.id, sentiment=sentiment, advice=advice(sentiment))


@router.post("/text", response_model=TextEntry, status_code=201)
async def create_text_entry(body: TextEntryCreate, services: AppServices = Depends(get_services)):
    """Upload a new text entry. 422 if the text is blank, 502 if the upload fails."""
    return await services.text_journal.create(body.text, title=body.title)


@router.patch("/text/{entry_id}", response_model=TextEntry)
async def update_text_entry(
    entry_id: UUID,
    body: TextEntryUpdate,
    services: AppServices = Depends(get_services),
):
    """Replace title and body; the entry keeps its id and date."""
    return await services.text_journal.edit(entry_id, body.title, body.text)


@router.get("/text/{entry_id}/content", response_model=TextContentResponse)
async def get_text_content(entry_id: UUID, services: AppServices = Depends(get_services)):
    entry = services.entries.get(entry_id)
    text = await services.text_journal.load(entry_id)
    return TextContentResponse(entry_id=entry.id, title=getattr(entry, "title", None), text=text)
