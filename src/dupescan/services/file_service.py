"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Removal of duplicate candidates. Files are moved to the system trash, never
erased permanently. Confirmation UX belongs to the caller.
"""
from pathlib import Path
from typing import Dict, List, Union
import logging

from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """
    Cross-platform trash operations via send2trash.
    """

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e
        logger.debug(f"Moved to trash: {path}")

    @classmethod
    def move_multiple_to_trash(cls, file_paths: List[str]):
        """Moves multiple files to trash with error aggregation."""
        errors = []
        for path in file_paths:
            try:
                cls.move_to_trash(path)
            except Exception as e:
                errors.append((path, str(e)))

        if errors:
            error_summary = "\n".join(
                f"  • {Path(p).name}: {msg.split(':')[-1].strip()}"
                for p, msg in errors[:5]
            )
            if len(errors) > 5:
                error_summary += f"\n  • ...and {len(errors) - 5} more files"
            raise RuntimeError(
                f"Failed to move {len(errors)} file(s) to trash:\n{error_summary}"
            )

    @classmethod
    def delete_file(cls, file_path: str) -> Dict[str, Union[bool, str]]:
        """
        Result-style wrapper for event-driven callers: never raises.
        Returns {"success": True, "message": ...} or {"success": False, "error": ...}.
        """
        try:
            cls.move_to_trash(file_path)
            return {"success": True, "message": "File moved to trash"}
        except (FileNotFoundError, RuntimeError) as e:
            logger.warning(f"Could not delete {file_path}: {e}")
            return {"success": False, "error": f"Could not delete file: {e}"}
