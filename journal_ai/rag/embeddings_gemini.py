"""Google Gemini embeddings provider"""

from typing import List
import google.generativeai as genai
import logging

from journal_ai.exceptions import EmbeddingProviderException
from journal_ai.rag.embeddings import EmbeddingProvider

logger = logging.getLogger(__name__)


class GeminiEmbeddingProvider(EmbeddingProvider):
    """Embeddings from Google Gemini"""

    name = "gemini"

    def __init__(self, api_key: str, model: str = "models/text-embedding-004"):
        # Ensure embedding model has "models/" prefix
        if not model.startswith("models/"):
            model = f"models/{model}"
        super().__init__(model)

        genai.configure(api_key=api_key)
        logger.info(f"Initializing Gemini embeddings with model: {self.model}")

    async def embed(self, text: str) -> List[float]:
        try:
            result = await genai.embed_content_async(
                model=self.model,
                content=text,
                task_type="retrieval_document"
            )
            return list(result['embedding'])
        except Exception as e:
            raise EmbeddingProviderException(f"Gemini embedding error: {e}") from e
