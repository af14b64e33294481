from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.api.v1.schemas import (
    LanguageSchema,
    RefreshResponseSchema,
    ResolvedTextSchema,
    TranslationCreateSchema,
    TranslationSchema,
    TranslationUpdateSchema,
)
from app.application.exceptions import StoreFetchError, StoreWriteError
from app.application.use_cases.translations import TranslationAdmin, TranslationResolver
from app.wiring.dependencies import get_translation_admin, get_translation_resolver

router = APIRouter()


@router.get("/translations/resolve", response_model=ResolvedTextSchema)
def resolve_key(
    key: str = Query(..., min_length=1),
    fallback: str | None = None,
    resolver: TranslationResolver = Depends(get_translation_resolver),
):
    return ResolvedTextSchema(language=resolver.language, text=resolver.resolve_by_key(key, fallback))


@router.get("/translations/text", response_model=ResolvedTextSchema)
def resolve_text(
    text: str = "",
    resolver: TranslationResolver = Depends(get_translation_resolver),
):
    return ResolvedTextSchema(language=resolver.language, text=resolver.resolve_by_text(text))


@router.post("/translations/refresh", response_model=RefreshResponseSchema)
def refresh(resolver: TranslationResolver = Depends(get_translation_resolver)):
    return RefreshResponseSchema(count=len(resolver.refresh()))


@router.get("/translations", response_model=list[TranslationSchema])
def list_translations(
    category: str | None = None,
    admin: TranslationAdmin = Depends(get_translation_admin),
):
    try:
        translations = admin.list_by_category(category) if category else admin.list_all()
    except StoreFetchError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return [TranslationSchema.from_entity(t) for t in translations]


@router.post("/translations", response_model=TranslationSchema, status_code=201)
def create_translation(
    req: TranslationCreateSchema,
    admin: TranslationAdmin = Depends(get_translation_admin),
):
    try:
        translation = admin.create(req.model_dump())
    except StoreWriteError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return TranslationSchema.from_entity(translation)


@router.patch("/translations/{translation_id}", response_model=TranslationSchema)
def update_translation(
    translation_id: str,
    req: TranslationUpdateSchema,
    admin: TranslationAdmin = Depends(get_translation_admin),
):
    fields = req.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    try:
        translation = admin.update(translation_id, fields)
    except StoreWriteError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if translation is None:
        raise HTTPException(status_code=404, detail=f"Translation {translation_id} not found")
    return TranslationSchema.from_entity(translation)


@router.delete("/translations/{translation_id}", status_code=204)
def delete_translation(
    translation_id: str,
    admin: TranslationAdmin = Depends(get_translation_admin),
):
    try:
        admin.delete(translation_id)
    except StoreWriteError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return Response(status_code=204)


@router.get("/language", response_model=LanguageSchema)
def get_language(resolver: TranslationResolver = Depends(get_translation_resolver)):
    return LanguageSchema(language=resolver.language)


@router.put("/language", response_model=LanguageSchema)
def set_language(
    req: LanguageSchema,
    resolver: TranslationResolver = Depends(get_translation_resolver),
):
    try:
        resolver.set_language(req.language.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return LanguageSchema(language=resolver.language)
