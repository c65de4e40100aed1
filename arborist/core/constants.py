"""Core constants for Arborist."""

# OpenAI defaults
OPENAI_DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
OPENAI_DEFAULT_EMBEDDING_DIMS = 1536
OPENAI_DEFAULT_CLASSIFICATION_MODEL = "gpt-4o-mini"

# Sentinel id for "create a new parent category" suggestions
CREATE_NEW_SUGGESTION_ID = "CREATE_NEW"

# Hard cap on parent-edge traversal
DEFAULT_MAX_PATH_DEPTH = 50

UNTITLED = "Untitled"
UNKNOWN_ITEM_TITLE = "Unknown Item"
