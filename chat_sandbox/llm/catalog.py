import logging

from chat_sandbox.llm.exceptions import ModelNotFoundError
from chat_sandbox.llm.schemas import ModelInfo

logger = logging.getLogger(__name__)

MODEL_CATALOG: list[ModelInfo] = [
    ModelInfo(
        id="llama-3.1-8b-instant",
        name="Llama 3.1 8B Instant",
        provider="Groq",
        input_cost_per_1m=0.05,
        output_cost_per_1m=0.08,
        context_window=131072,
    ),
    ModelInfo(
        id="deepseek/deepseek-chat",
        name="DeepSeek Chat",
        provider="DeepSeek",
        input_cost_per_1m=0.14,
        output_cost_per_1m=0.28,
        context_window=163840,
    ),
    ModelInfo(
        id="mistralai/mistral-small-24b-instruct-2501",
        name="Mistral Small 24B",
        provider="Mistral",
        input_cost_per_1m=0.10,
        output_cost_per_1m=0.30,
        context_window=32768,
    ),
    ModelInfo(
        id="mistralai/mistral-nemo",
        name="Mistral Nemo",
        provider="Mistral",
        input_cost_per_1m=0.03,
        output_cost_per_1m=0.03,
        context_window=131072,
    ),
    ModelInfo(
        id="google/gemini-flash-1.5-8b",
        name="Gemini Flash 1.5 8B",
        provider="Google",
        input_cost_per_1m=0.0375,
        output_cost_per_1m=0.15,
        context_window=1000000,
    ),
]


def get_available_models() -> list[ModelInfo]:
    return list(MODEL_CATALOG)


def get_model(model_id: str | None) -> ModelInfo:
    """
    Look up a model in the catalog, falling back to the first entry for unknown or missing ids.

    Args:
        model_id: Catalog id of the model, e.g. "mistralai/mistral-nemo"

    Returns:
        The matching ModelInfo, or the first catalog entry
    """
    models = get_available_models()
    if not models:
        raise ModelNotFoundError("The model catalog is empty")

    for model in models:
        if model.id == model_id:
            return model

    logger.info(f"Model '{model_id}' not in catalog, defaulting to '{models[0].id}'")
    return models[0]
