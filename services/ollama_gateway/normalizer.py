"""Model name normalization shared by the buffered and streaming bridges."""

from typing import Optional

from config import DEFAULT_MODEL, MODEL_ALIASES


def normalize_model(model: Optional[str]) -> str:
    """Map a front-end model token onto the identifier Ollama expects.

    "llama3.1" is a known alias; other dotted names such as "llama3.8b"
    are coerced into Ollama's "name:tag" form unless they already carry
    a tag.
    """
    if model is None:
        return DEFAULT_MODEL
    if model in MODEL_ALIASES:
        return MODEL_ALIASES[model]
    if "." in model and ":" not in model:
        return model.replace(".", ":")
    return model
