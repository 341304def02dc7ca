"""AI generation API endpoints."""

import json
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from unslop.api.deps import get_context_service, get_llm, get_writer
from unslop.api.schemas import GenerateRequest, GenerateResponse, SaveResultResponse
from unslop.content.context import ProductContextService
from unslop.llm.client import LLMClient, LLMError, LLMNotConfiguredError
from unslop.storage.writer import FileSystemWriter


router = APIRouter(prefix="/api/generate", tags=["generate"])


def _build_prompt(request: GenerateRequest, context_service: ProductContextService) -> str:
    if not request.include_product_context:
        return request.prompt
    context = context_service.get_product_context()
    return ProductContextService.build_context_prompt(context) + request.prompt


def _sse(event: str, data: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


@router.post("", response_model=GenerateResponse)
async def generate(
    request: GenerateRequest,
    llm: LLMClient = Depends(get_llm),
    context_service: ProductContextService = Depends(get_context_service),
    writer: FileSystemWriter = Depends(get_writer),
) -> GenerateResponse:
    """Generate text, optionally saving it into the project directory.

    Returns 400 when no API key is configured and 502 when the provider call
    fails.
    """
    prompt = _build_prompt(request, context_service)
    try:
        content = await llm.generate(
            prompt, system_prompt=request.system_prompt, model=request.model
        )
    except LLMNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except LLMError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    save_result = None
    if request.save_path:
        result = writer.save_file(request.save_path, content, request.mime_type)
        save_result = SaveResultResponse.model_validate(result)

    return GenerateResponse(content=content, save_result=save_result)


@router.post("/stream")
async def generate_stream(
    request: GenerateRequest,
    llm: LLMClient = Depends(get_llm),
    context_service: ProductContextService = Depends(get_context_service),
    writer: FileSystemWriter = Depends(get_writer),
) -> StreamingResponse:
    """Stream generated text as Server-Sent Events.

    Events: "chunk" ({"content"}) per piece of text, then "complete"
    ({"content", "save_result"}) or "error" ({"message"}).
    """
    if not llm.is_configured():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="OpenRouter API key not configured",
        )

    prompt = _build_prompt(request, context_service)

    async def event_stream() -> AsyncGenerator[str, None]:
        parts: list[str] = []
        try:
            async for chunk in llm.generate_stream(
                prompt, system_prompt=request.system_prompt, model=request.model
            ):
                parts.append(chunk)
                yield _sse("chunk", {"content": chunk})
        except LLMError as e:
            yield _sse("error", {"message": str(e)})
            return

        content = "".join(parts)
        save_result = None
        if request.save_path:
            result = writer.save_file(request.save_path, content, request.mime_type)
            save_result = SaveResultResponse.model_validate(result).model_dump()

        yield _sse("complete", {"content": content, "save_result": save_result})

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )
