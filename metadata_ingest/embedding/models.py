from dataclasses import dataclass


@dataclass(frozen=True)
class EmbeddingOutcome:
    """Either a validated vector or the reason none was produced."""

    embedding: list[float] | None
    message: str = ""

    @property
    def dimension(self) -> int:
        return len(self.embedding) if self.embedding is not None else 0

    def to_dict(self) -> dict[str, object]:
        if self.embedding is None:
            return {"embedding": None, "message": self.message}
        return {"embedding": list(self.embedding), "dimension": self.dimension}
