"""User settings API endpoints (API key and model preference)."""

from fastapi import APIRouter, Depends, HTTPException, status

from unslop.api.deps import get_preferences, get_services
from unslop.api.schemas import ApiKeyStatus, ApiKeyUpdate, ModelPreference
from unslop.preferences import (
    PreferencesError,
    PreferencesStore,
    mask_api_key,
    validate_api_key,
)
from unslop.services import Services


router = APIRouter(prefix="/api/settings", tags=["settings"])


def _api_key_status(preferences: PreferencesStore) -> ApiKeyStatus:
    api_key = preferences.get_api_key()
    if not api_key:
        return ApiKeyStatus(configured=False)
    return ApiKeyStatus(configured=True, masked=mask_api_key(api_key))


@router.get("/api-key", response_model=ApiKeyStatus)
async def get_api_key_status(
    preferences: PreferencesStore = Depends(get_preferences),
) -> ApiKeyStatus:
    """Whether a key is saved. The key itself is only ever returned masked."""
    return _api_key_status(preferences)


@router.put("/api-key", response_model=ApiKeyStatus)
async def save_api_key(
    body: ApiKeyUpdate,
    preferences: PreferencesStore = Depends(get_preferences),
) -> ApiKeyStatus:
    if not validate_api_key(body.api_key):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid API key format. OpenRouter keys start with sk-or-v1-",
        )
    try:
        preferences.save_api_key(body.api_key.strip())
    except PreferencesError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return _api_key_status(preferences)


@router.delete("/api-key", status_code=status.HTTP_204_NO_CONTENT)
async def clear_api_key(
    preferences: PreferencesStore = Depends(get_preferences),
) -> None:
    try:
        preferences.clear_api_key()
    except PreferencesError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/model", response_model=ModelPreference)
async def get_model(
    services: Services = Depends(get_services),
) -> ModelPreference:
    """The model used for generation: the saved choice, else the configured default."""
    return ModelPreference(model=services.llm_client().model)


@router.put("/model", response_model=ModelPreference)
async def save_model(
    body: ModelPreference,
    preferences: PreferencesStore = Depends(get_preferences),
) -> ModelPreference:
    try:
        preferences.save_model(body.model)
    except PreferencesError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return body
