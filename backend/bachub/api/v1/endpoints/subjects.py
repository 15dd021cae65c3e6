from fastapi import APIRouter, Depends
from typing import List

from bachub.core.exceptions import SubjectNotFoundError
from bachub.schemas import SubjectResponse
from bachub.storage import Storage, get_storage

router = APIRouter()


@router.get("", response_model=List[SubjectResponse])
async def list_subjects(storage: Storage = Depends(get_storage)):
    """List all subjects"""
    return await storage.get_subjects()


@router.get("/{subject_id}", response_model=SubjectResponse)
async def get_subject(subject_id: int, storage: Storage = Depends(get_storage)):
    subject = await storage.get_subject(subject_id)
    if not subject:
        raise SubjectNotFoundError(subject_id)
    return subject
