from fastapi import APIRouter, Depends
from family_tree.core.dependencies import require_permission
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend
from family_tree.modules.archive.schemas import (
    AudioFileCreate, AudioFileUpdate, AudioFileResponse,
    DocumentCreate, DocumentUpdate, DocumentResponse,
)
from family_tree.modules.archive.service import AudioFileService, DocumentService
from family_tree.modules.auth.schemas import UserProfile
from typing import List, Optional

audio_router = APIRouter(prefix="/audio-files", tags=["archive"])
documents_router = APIRouter(prefix="/documents", tags=["archive"])


def get_audio_service(backend: Backend = Depends(get_backend)) -> AudioFileService:
    return AudioFileService(backend)


def get_document_service(backend: Backend = Depends(get_backend)) -> DocumentService:
    return DocumentService(backend)


@audio_router.get("", response_model=List[AudioFileResponse])
async def list_audio_files(
    person_id: Optional[int] = None,
    woman_id: Optional[int] = None,
    event_id: Optional[int] = None,
    profile: UserProfile = Depends(require_permission("read")),
    service: AudioFileService = Depends(get_audio_service)
):
    return service.list_items(person_id=person_id, woman_id=woman_id, event_id=event_id)


@audio_router.post("", response_model=AudioFileResponse, status_code=201)
async def create_audio_file(
    audio_data: AudioFileCreate,
    profile: UserProfile = Depends(require_permission("write")),
    service: AudioFileService = Depends(get_audio_service)
):
    return service.create_item(audio_data)


@audio_router.get("/{audio_id}", response_model=AudioFileResponse)
async def get_audio_file(
    audio_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: AudioFileService = Depends(get_audio_service)
):
    return service.get_item(audio_id)


@audio_router.put("/{audio_id}", response_model=AudioFileResponse)
async def update_audio_file(
    audio_id: int,
    audio_data: AudioFileUpdate,
    profile: UserProfile = Depends(require_permission("write")),
    service: AudioFileService = Depends(get_audio_service)
):
    return service.update_item(audio_id, audio_data)


@audio_router.delete("/{audio_id}")
async def delete_audio_file(
    audio_id: int,
    profile: UserProfile = Depends(require_permission("edit")),
    service: AudioFileService = Depends(get_audio_service)
):
    service.delete_item(audio_id)
    return {"message": "Audio file deleted successfully"}


@documents_router.get("", response_model=List[DocumentResponse])
async def list_documents(
    person_id: Optional[int] = None,
    woman_id: Optional[int] = None,
    event_id: Optional[int] = None,
    profile: UserProfile = Depends(require_permission("read")),
    service: DocumentService = Depends(get_document_service)
):
    return service.list_items(person_id=person_id, woman_id=woman_id, event_id=event_id)


@documents_router.post("", response_model=DocumentResponse, status_code=201)
async def create_document(
    document_data: DocumentCreate,
    profile: UserProfile = Depends(require_permission("write")),
    service: DocumentService = Depends(get_document_service)
):
    return service.create_item(document_data)


@documents_router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: DocumentService = Depends(get_document_service)
):
    return service.get_item(document_id)


@documents_router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: int,
    document_data: DocumentUpdate,
    profile: UserProfile = Depends(require_permission("write")),
    service: DocumentService = Depends(get_document_service)
):
    return service.update_item(document_id, document_data)


@documents_router.delete("/{document_id}")
async def delete_document(
    document_id: int,
    profile: UserProfile = Depends(require_permission("edit")),
    service: DocumentService = Depends(get_document_service)
):
    service.delete_item(document_id)
    return {"message": "Document deleted successfully"}
