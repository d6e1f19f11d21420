import os
from typing import List


class FileManager:
    """
    General file management operations used by the stores, logging and commands.
    """

    @staticmethod
    def create_folder(folder_path: str) -> None:
        """
        Creates a folder (and parents) if it does not already exist.

        Args:
            folder_path (str): Path to the folder.
        """
        if folder_path:
            os.makedirs(folder_path, exist_ok=True)

    @staticmethod
    def validate_file(file_path: str, allowed_extensions: List[str]) -> None:
        """
        Validates that a file exists and has one of the allowed extensions.

        Args:
            file_path (str): Path to the file.
            allowed_extensions (List[str]): Extensions such as [".json"].

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the extension is not allowed.
        """
        if not os.path.isfile(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")
        _, extension = os.path.splitext(file_path)
        if extension.lower() not in allowed_extensions:
            raise ValueError(f"Invalid file extension '{extension}'. Allowed: {', '.join(allowed_extensions)}")
