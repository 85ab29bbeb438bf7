"""
Local file-based key-value storage for feedback records.
Used as a stand-in for the table store during development and testing.
"""
import json
import threading
from pathlib import Path
from typing import Dict, Any, Optional, List
import logging

logger = logging.getLogger(__name__)

# Default storage directory
STORAGE_DIR = Path(__file__).parent.parent.parent / "tmp"
INDEX_FILENAME = "index.json"
KEY_FIELD = "id"


class LocalStorage:
    """
    Simple file-based key-value store.
    Each table is a directory holding one JSON file per item, named by the
    item's key. An index maps table -> key -> createdAt for quick listing.
    """

    def __init__(self, storage_dir: Optional[Path] = None):
        """
        Initialize local storage.

        :param storage_dir: Root directory for storage. Defaults to <service>/tmp
        """
        self.storage_dir = Path(storage_dir) if storage_dir else STORAGE_DIR
        self.index_file = self.storage_dir / INDEX_FILENAME
        self._lock = threading.Lock()

        # Create directories if they don't exist
        self.storage_dir.mkdir(parents=True, exist_ok=True)

        # Initialize index if it doesn't exist
        self._ensure_index()

    def _ensure_index(self):
        """Ensure index file exists and is valid."""
        if not self.index_file.exists():
            self._write_index({})
        else:
            # Validate index file
            try:
                self._read_index()
            except json.JSONDecodeError as e:
                logger.warning(f"Index file corrupted, recreating: {e}")
                self._write_index({})

    def _read_index(self) -> Dict[str, Any]:
        """Read the index file."""
        with open(self.index_file, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _write_index(self, index: Dict[str, Any]):
        """Write the index file."""
        with open(self.index_file, 'w', encoding='utf-8') as f:
            json.dump(index, f, indent=2, ensure_ascii=False)

    @staticmethod
    def _check_segment(value: Any, what: str) -> str:
        """Reject names that could escape the storage directory."""
        if not isinstance(value, str) or not value:
            raise ValueError(f"{what} must be a non-empty string")
        if "/" in value or "\\" in value or value == "." or ".." in value:
            raise ValueError(f"{what} contains illegal path characters: {value!r}")
        return value

    def _item_file(self, table_name: str, key: str) -> Path:
        table = self._check_segment(table_name, "Table name")
        key = self._check_segment(key, "Item key")
        return self.storage_dir / table / f"{key}.json"

    def put_item(self, table_name: str, item: Dict[str, Any]) -> str:
        """
        Insert or replace an item, keyed by its ``id`` field.

        :param table_name: Table (directory) to write to
        :param item: Item to store; must carry a non-empty string ``id``
        :return: The item key
        :raises ValueError: If the table name or key is unusable
        :raises TypeError: If the item is not JSON serializable
        """
        key = item.get(KEY_FIELD)
        item_file = self._item_file(table_name, key)
        payload = json.dumps(item, indent=2, ensure_ascii=False)

        with self._lock:
            # Index is read first so a failed read leaves no item file behind
            index = self._read_index()

            item_file.parent.mkdir(parents=True, exist_ok=True)
            replaced = item_file.exists()
            item_file.write_text(payload, encoding='utf-8')

            index.setdefault(table_name, {})[key] = item.get("createdAt")
            self._write_index(index)

        logger.info(f"Item {'replaced' if replaced else 'saved'}: {table_name}/{key} -> {item_file}")
        return key

    def get_item(self, table_name: str, key: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve an item by key.

        :return: Item dictionary or None if not found
        """
        item_file = self._item_file(table_name, key)

        if not item_file.exists():
            logger.warning(f"Item not found: {table_name}/{key}")
            return None

        with open(item_file, 'r', encoding='utf-8') as f:
            return json.load(f)

    def list_items(self, table_name: str) -> List[Dict[str, Any]]:
        """
        List index entries for a table, oldest first.

        :return: List of ``{"id", "createdAt"}`` entries
        """
        with self._lock:
            entries = self._read_index().get(table_name, {})

        return [
            {"id": key, "createdAt": created_at}
            for key, created_at in sorted(entries.items(), key=lambda kv: (kv[1] or "", kv[0]))
        ]
