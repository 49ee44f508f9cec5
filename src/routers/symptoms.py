"""Symptom log endpoints for the selected user."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from src.dependencies import Store
from src.models.tracking import Symptom, SymptomCreate
from src.tracker.validation import is_valid_severity

router = APIRouter(prefix="/symptoms", tags=["symptoms"])


@router.get("", response_model=list[Symptom])
async def list_symptoms(
    store: Store,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> Any:
    symptoms = store.current_user.symptoms
    if start_date:
        symptoms = [s for s in symptoms if s.date >= start_date]
    if end_date:
        symptoms = [s for s in symptoms if s.date <= end_date]
    return sorted(symptoms, key=lambda s: s.date, reverse=True)


@router.post("", response_model=Symptom, status_code=201)
async def create_symptom(store: Store, body: SymptomCreate) -> Any:
    if not is_valid_severity(body.severity, store.config):
        r = store.config.validation.severity
        raise HTTPException(
            status_code=422, detail=f"severity must be between {r.min} and {r.max}"
        )
    return store.add_symptom(body.date, body.type, body.severity, body.notes)


@router.delete("/{symptom_id}", status_code=204)
async def delete_symptom(symptom_id: uuid.UUID, store: Store) -> None:
    if not store.delete_symptom(symptom_id):
        raise HTTPException(status_code=404, detail="Symptom not found")
