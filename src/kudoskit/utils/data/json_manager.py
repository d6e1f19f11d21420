import json
import os
from typing import Any

from filelock import FileLock


class JSONManager:
    """
    JSON file-specific operations including reading, writing and canonical serialization.

    Example Usage:
        >>> JSONManager.read_json("example.json", default={})
        {}

        >>> JSONManager.write_json({"key": "value"}, "example.json")
        True
    """

    @staticmethod
    def read_json(file_path: str, default: Any = None) -> Any:
        """
        Reads and returns content from a JSON file. Returns a default value if file does not exist.

        Args:
            file_path (str): Path to the JSON file.
            default (Any): Value to return if the file is not found. Defaults to None.

        Returns:
            Any: Parsed content of the JSON file or the default value.
        """
        if not os.path.exists(file_path):
            if default is not None:
                return default
            raise FileNotFoundError(f"JSON file not found: {file_path}")
        with open(file_path, "r", encoding="utf-8") as file:
            return json.load(file)

    @staticmethod
    def write_json(data: Any, file_path: str) -> bool:
        """
        Writes data to a JSON file. The content is written to a temporary file first and
        then moved over the target, so readers never observe a partially written file.

        Args:
            data (Any): Data to be written in JSON format.
            file_path (str): Path to save the JSON file.

        Returns:
            bool: True if the operation is successful.
        """
        lock = FileLock(f"{file_path}.lock")
        with lock:
            temp_path = f"{file_path}.tmp"
            with open(temp_path, "w", encoding="utf-8") as file:
                json.dump(data, file, indent=4, ensure_ascii=False, default=str)
            os.replace(temp_path, file_path)
        return True

    @staticmethod
    def create_json(data: Any) -> str:
        """
        Serializes data into a canonical JSON string (sorted keys, compact separators).

        Two structurally equal objects always produce the same string, which makes the
        result usable as a signing or hashing input.

        Args:
            data (Any): Data to serialize.

        Returns:
            str: Canonical JSON representation.
        """
        return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)
