"""Settings for diff searches."""

from dataclasses import dataclass
import json
import os
from typing import Any, Dict

from diff_search.diff_search_provider import DEFAULT_MAX_FILE_SIZE


@dataclass
class DiffSearchSettings:
    """
    Settings controlling how changes are collected and searched.

    Attributes:
        git_command: Name or path of the git executable
        max_file_size: Untracked files of this many bytes or more are skipped
        case_sensitive: Default for case-sensitive matching
        whole_word: Default for whole-word matching
        use_regex: Default for treating queries as regular expressions
    """
    git_command: str = "git"
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    case_sensitive: bool = False
    whole_word: bool = False
    use_regex: bool = False

    @classmethod
    def create_default(cls) -> "DiffSearchSettings":
        """Create a new DiffSearchSettings object with default values."""
        return cls()

    @staticmethod
    def default_path() -> str:
        """Get the path of the per-user settings file."""
        return os.path.expanduser("~/.diff_search/settings.json")

    @classmethod
    def load(cls, path: str) -> "DiffSearchSettings":
        """
        Load settings from file.

        Missing values keep their defaults and unknown values are ignored.

        Args:
            path: Path to the settings file

        Returns:
            DiffSearchSettings object with loaded values

        Raises:
            json.JSONDecodeError: If file contains invalid JSON
            ValueError: If the file is not a JSON object or a value has the wrong type
        """
        settings = cls.create_default()

        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a JSON object: {path}")

        settings.git_command = cls._get_value(data, "gitCommand", str, settings.git_command)
        settings.max_file_size = cls._get_value(data, "maxFileSize", int, settings.max_file_size)
        settings.case_sensitive = cls._get_value(data, "caseSensitive", bool, settings.case_sensitive)
        settings.whole_word = cls._get_value(data, "wholeWord", bool, settings.whole_word)
        settings.use_regex = cls._get_value(data, "useRegex", bool, settings.use_regex)

        if not settings.git_command:
            raise ValueError("'gitCommand' must not be empty")

        if settings.max_file_size <= 0:
            raise ValueError(f"'maxFileSize' must be positive, got {settings.max_file_size}")

        return settings

    @staticmethod
    def _get_value(data: Dict[str, Any], key: str, value_type: type, default: Any) -> Any:
        """
        Get a value of a given JSON type, or the default if the key is absent.

        Raises:
            ValueError: If the value has the wrong type
        """
        if key not in data:
            return default

        value = data[key]

        # bool is a subclass of int, but true is not a size
        if not isinstance(value, value_type) or (value_type is int and isinstance(value, bool)):
            raise ValueError(f"'{key}' must be of type {value_type.__name__}, got {value!r}")

        return value

    def save(self, path: str) -> None:
        """
        Save settings to file.

        Args:
            path: Path to save settings to
        """
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        data = {
            "gitCommand": self.git_command,
            "maxFileSize": self.max_file_size,
            "caseSensitive": self.case_sensitive,
            "wholeWord": self.whole_word,
            "useRegex": self.use_regex
        }

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=4)
