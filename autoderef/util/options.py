"""File in charge of managing config and commandline options for linting."""
import json
import logging
from argparse import ArgumentParser, BooleanOptionalAction, Namespace
from copy import deepcopy
from os.path import dirname, isfile, join
from typing import Dict, Iterator, List, Optional, Tuple, Union


class Options:
    """Class in charge of parsing the options for the lint passes."""

    base = dirname(__file__)
    DEFAULT_CONFIG = join(base, "default.json")
    USER_CONFIG = join(base, "../../", "config.json")

    def __init__(self, defaults: Optional[List[Dict]] = None, settings_key_values: Optional[Dict[str, Union[str, int, bool, list]]] = None) -> None:
        logging.debug("initialize Options")
        self._defaults = defaults if defaults is not None else []
        self._settings_key_values = settings_key_values if settings_key_values is not None else {}

    def __str__(self) -> str:
        return json.dumps(self._settings_key_values, indent=4)

    def _load_user_config(self):
        """Load additional user settings and override defaults"""
        if isfile(self.USER_CONFIG):
            logging.debug(f"user config found at {self.USER_CONFIG}")
            with open(self.USER_CONFIG, "r") as f:
                try:
                    self._settings_key_values.update(json.load(f))
                except json.JSONDecodeError:
                    logging.warning(f"could not load user config at {self.USER_CONFIG}")

    def set(self, key: str, value):
        """Set key to value"""
        self._settings_key_values[key] = value

    def getstring(self, key: str, fallback: Optional[str] = None) -> str:
        """
        Return string value for key. Convert value to string.
        :param key - str: setting key ("section.setting")
        :param fallback - str: if given, return fallback on KeyError
        """
        if (value := self._settings_key_values.get(key, fallback)) is not None:
            return value if isinstance(value, str) else str(value).lower()
        raise KeyError(f"Invalid setting for {key}")

    def getboolean(self, key: str, fallback: Optional[bool] = None) -> bool:
        """
        Return boolean value for key.
        :param key - str: setting key ("section.setting")
        :param fallback - bool: if given, return fallback on KeyError
        """
        if (value := self._settings_key_values.get(key, fallback)) is not None:
            if isinstance(value, bool):
                return value
        raise KeyError(f"Invalid setting for {key}")

    def getlist(self, key: str, fallback: Optional[List[str]] = None) -> List[str]:
        """
        Return List[str] value for key.
        :param key - str: setting key ("section.setting")
        :param fallback - List[str]: if given, return fallback on KeyError
        """
        if (value := self._settings_key_values.get(key, fallback)) is not None:
            if isinstance(value, list):
                return value
        raise KeyError(f"Invalid setting for {key}")

    def getint(self, key: str, fallback: Optional[int] = None) -> int:
        """
        Return integer value for key.
        :param key - str: setting key ("section.setting")
        :param fallback - int: if given, return fallback on KeyError
        """
        if (value := self._settings_key_values.get(key, fallback)) is not None:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        raise KeyError(f"Invalid setting for {key}")

    @classmethod
    def load_default_options(cls):
        """Parse default options for the lint passes."""
        defaults = cls._read_json_file(cls.DEFAULT_CONFIG)
        settings_key_values = {key: value for key, value in cls._get_key_value_pairs_from_defaults(defaults)}
        return cls(defaults=defaults, settings_key_values=settings_key_values)

    @classmethod
    def from_cli(cls, args: Optional[Namespace] = None):
        """
        Create Options for CLI invocation. Different option sources are applied in (reverse) order of precedence:
            1. Default options        (recommended settings from default.json)
            2. User config            (config.json from the project root, overrides defaults)
            3. Command line arguments (override the previous)
        """
        options = cls.load_default_options()
        options._load_user_config()
        if args is not None:
            options._settings_key_values.update({key: value for key, value in vars(args).items() if value is not None})
        return options

    @classmethod
    def from_dict(cls, options_dict: Dict[str, Union[bool, str, int, list]]):
        """Create Options from dict only"""
        return cls(settings_key_values=deepcopy(options_dict))

    @classmethod
    def register_defaults_in_argument_parser(cls, parser: ArgumentParser):
        """Register default options in ArgumentParser"""
        option_groups = cls._read_json_file(cls.DEFAULT_CONFIG)
        for group in option_groups:
            argument_group = parser.add_argument_group(title=group["title"], description=group["description"])
            for args, kwargs in cls._iter_argparse_kwargs_for_default_options(group["options"]):
                argument_group.add_argument(*args, **kwargs)

    @staticmethod
    def _get_argparse_kwargs_from_dict(option: Dict) -> Tuple[List, Dict]:
        """Create keyword arguments for ArgumentParser.add_argument() from dicts found in default.json"""
        args = [option["argument_name"]]
        kwargs = {
            "dest": option["dest"],
            "help": option["description"],
        }
        if "enum" in option:
            kwargs["choices"] = option["enum"]
        default = option["default"]
        if default and isinstance(default, list):
            default = " ".join(default)
        kwargs["help"] += f" (default: {default})"
        return args, kwargs

    @classmethod
    def _arg_bool(cls, option: Dict):
        """Create additional kwargs for boolean option (flag), and its negation"""
        args, kwargs = cls._get_argparse_kwargs_from_dict(option)
        kwargs["action"] = BooleanOptionalAction
        return args, kwargs

    @classmethod
    def _arg_array(cls, option: Dict):
        """Create additional kwargs for array option"""
        args, kwargs = cls._get_argparse_kwargs_from_dict(option)
        kwargs["nargs"] = "*"
        return args, kwargs

    @classmethod
    def _arg_number(cls, option: Dict):
        """Create additional kwargs for number option"""
        args, kwargs = cls._get_argparse_kwargs_from_dict(option)
        kwargs["type"] = int
        if not "choices" in kwargs:
            kwargs["metavar"] = "INTEGER"
        return args, kwargs

    @classmethod
    def _arg_string(cls, option: Dict):
        """Create additional kwargs for string option"""
        args, kwargs = cls._get_argparse_kwargs_from_dict(option)
        kwargs["type"] = str
        if not "choices" in kwargs:
            kwargs["metavar"] = "STRING"
        return args, kwargs

    @classmethod
    def _iter_argparse_kwargs_for_default_options(cls, options: List[Dict]):
        """Iterate default options and yield args + kwargs for registering in argparse"""

        ARG_TYPE_HANDLER = {"boolean": cls._arg_bool, "array": cls._arg_array, "number": cls._arg_number, "string": cls._arg_string}

        for option in options:
            if option["is_hidden_from_cli"]:
                continue
            yield ARG_TYPE_HANDLER[option["type"]](option)

    @staticmethod
    def _read_json_file(filepath: str):
        """Return parsed JSON file"""
        with open(filepath, "r") as f:
            return json.load(f)

    @staticmethod
    def _get_key_value_pairs_from_defaults(defaults: List[Dict]) -> Iterator[Tuple[str, Union[str, int, list, bool]]]:
        """Extract key value pairs from defaults"""
        for option_group in defaults:
            for option in option_group["options"]:
                yield option["dest"], option["default"]
