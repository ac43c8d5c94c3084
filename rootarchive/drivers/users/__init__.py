"""User directory drivers."""

from rootarchive.drivers.users.static import StaticUserDirectory
from rootarchive.drivers.users.yaml_file import YamlUserDirectory

__all__ = ["StaticUserDirectory", "YamlUserDirectory"]
