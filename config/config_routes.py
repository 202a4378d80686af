# config/config_routes.py
import logging

from fastapi import APIRouter, Depends

from app.users.auth_dependencies import get_current_user
from config.config_schemas import LLMConfigRequest, LLMConfigResponse
from config.llmconfig import llm_settings

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])

# request field → settings attribute
CONFIG_FIELDS = {
    "llm_provider": "LLM_PROVIDER",
    "ollama_llm_model": "OLLAMA_LLM_MODEL",
    "openai_llm_model": "OPENAI_LLM_MODEL",
    "claude_llm_model": "CLAUDE_LLM_MODEL",
    "groq_llm_model": "GROQ_LLM_MODEL",
    "gemini_llm_model": "GEMINI_LLM_MODEL",
    "llm_temperature": "LLM_TEMPERATURE",
    "llm_max_tokens": "LLM_MAX_TOKENS",
    "suggestions_max_tokens": "SUGGESTIONS_MAX_TOKENS",
    "chat_history_limit": "CHAT_HISTORY_LIMIT",
}


@router.get("/llm-config", response_model=LLMConfigResponse)
async def get_llm_config():
    """
    Get current LLM configuration.

    Returns the provider, the model names per provider and the generation
    settings used for evolutions, reading suggestions and the chat.
    """
    return LLMConfigResponse(
        current_llm_model=llm_settings.current_llm_model,
        **{field: getattr(llm_settings, attr) for field, attr in CONFIG_FIELDS.items()},
    )


@router.post("/llm-config", response_model=LLMConfigResponse)
async def update_llm_config(config: LLMConfigRequest):
    """
    Update LLM configuration (in-memory only, resets on restart).

    Supports partial updates: send only the fields you want to change.

    Example request:
    ```json
    {
        "llm_provider": "claude",
        "llm_temperature": 0.1
    }
    ```
    """
    updated_fields = []

    for field, value in config.model_dump(exclude_none=True).items():
        setattr(llm_settings, CONFIG_FIELDS[field], value)
        updated_fields.append(f"{field} → {value}")

    # Log changes
    logger.info(f"📝 LLM Config Updated: {len(updated_fields)} field(s)")
    for field in updated_fields:
        logger.info(f"   • {field}")

    return await get_llm_config()
