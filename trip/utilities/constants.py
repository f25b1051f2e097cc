from typing import Final

DEFAULT_PACKING_CATEGORY: Final[str] = "Other"
MEAL_TYPES: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner", "snack")
SHOPPING_CATEGORIES: Final[tuple[str, ...]] = ("food", "camping")
MAX_NAME_LENGTH: Final[int] = 100

# Entity streams persisted per trip
PACKING_ITEMS: Final[str] = "packing_items"
MEALS: Final[str] = "meals"
SHOPPING_ITEMS: Final[str] = "shopping_items"
TODO_ITEMS: Final[str] = "todo_items"
DELETED_INGREDIENTS: Final[str] = "deleted_ingredients"
ENTITY_STREAMS: Final[tuple[str, ...]] = (PACKING_ITEMS, MEALS, SHOPPING_ITEMS, TODO_ITEMS, DELETED_INGREDIENTS)

# Retention score weights used when merging duplicate packing items
SCORE_FLAG: Final[int] = 1
SCORE_GROUP: Final[int] = 3

SAVE_DEBOUNCE_SECONDS: Final[float] = 0.150
CLEANUP_INTERVAL_SECONDS: Final[float] = 15 * 60
TEMP_RETENTION_SECONDS: Final[float] = 30 * 60
EPHEMERAL_KEY_PREFIXES: Final[tuple[str, ...]] = ("temp_", "cache_")
