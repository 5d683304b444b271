"""
models.py - Model roster for the arena
"""

# modality: which inputs the model accepts natively
ALL_MODELS = [
    {"id": "gpt4o", "name": "GPT-4.1 Omni", "provider": "OpenAI",
     "tags": ["reasoning", "tools", "multimodal"], "modality": ["text", "vision", "audio"]},
    {"id": "claude3-opus", "name": "Claude 3 Opus", "provider": "Anthropic",
     "tags": ["analysis", "alignment", "orchestration"], "modality": ["text", "vision"]},
    {"id": "gemini-1.5", "name": "Gemini 1.5 Pro", "provider": "Google DeepMind",
     "tags": ["reasoning", "multimodal", "long-context"], "modality": ["text", "vision", "audio", "video"]},
    {"id": "llama3-70b", "name": "Llama 3 70B", "provider": "Meta AI",
     "tags": ["open", "fine-tuning", "deployable"], "modality": ["text", "vision"]},
    {"id": "mistral-large", "name": "Mistral Large", "provider": "Mistral AI",
     "tags": ["europe", "balanced", "multilingual"], "modality": ["text", "vision"]},
    {"id": "qwen2-vl", "name": "Qwen2 VL 72B", "provider": "Alibaba Cloud",
     "tags": ["vision-language", "instruction", "enterprise"], "modality": ["text", "vision"]},
    {"id": "idefics3", "name": "Idefics 3", "provider": "Hugging Face",
     "tags": ["open", "vision", "creative"], "modality": ["text", "vision"]},
]

_BY_ID = {m["id"]: m for m in ALL_MODELS}


def get_model(model_id: str) -> dict | None:
    return _BY_ID.get(model_id)


def format_model_name(model_id: str) -> str:
    """Display name for a model id, falling back to the id itself."""
    model = _BY_ID.get(model_id)
    return model["name"] if model else model_id


def roster() -> list[dict]:
    """Catalog sorted by display name (the order the roster is shown in)."""
    return sorted(ALL_MODELS, key=lambda m: m["name"].lower())
