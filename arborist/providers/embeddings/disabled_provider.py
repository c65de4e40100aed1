"""Disabled embedding provider - zero vectors, no network calls."""

from arborist.core.constants import OPENAI_DEFAULT_EMBEDDING_DIMS


class DisabledEmbeddingProvider:
    """Returns zero vectors of ``dims`` length for every text.

    Selected with ``provider = "disabled"``. Zero vectors have cosine
    similarity 0 with everything, so vector legs contribute nothing while the
    lexical pipeline keeps working.
    """

    def __init__(self, dims: int = OPENAI_DEFAULT_EMBEDDING_DIMS, **_: object):
        self._dims = dims

    @property
    def name(self) -> str:
        return "disabled"

    @property
    def model(self) -> str:
        return "none"

    @property
    def dims(self) -> int:
        return self._dims

    async def embed(self, texts: list[str]) -> list[list[float]]:
        return [[0.0] * self._dims for _ in texts]

    async def embed_batch(
        self, texts: list[str], batch_size: int | None = None
    ) -> list[list[float]]:
        return await self.embed(texts)
