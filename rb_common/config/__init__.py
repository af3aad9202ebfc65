"""Configuration helpers."""

from rb_common.config.env import parse_bool_env, parse_int_env
from rb_common.config.settings import BrowserSettings

__all__ = ["BrowserSettings", "parse_bool_env", "parse_int_env"]
